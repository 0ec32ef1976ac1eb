"""Fixed company list and area -> cluster -> plant hierarchy."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from checkin.core.settings import settings

logger = logging.getLogger(__name__)


DEFAULT_TAXONOMY = {
    "companies": ["PDO", "BP Oman", "OQ", "CCED", "Schlumberger"],
    "areas": {
        "North": {
            "Cluster N1": ["Plant N1-A", "Plant N1-B"],
            "Cluster N2": ["Plant N2-A"],
        },
        "Central": {
            "Cluster C1": ["Plant C1-A", "Plant C1-B"],
            "Cluster C2": ["Plant C2-A"],
        },
        "South": {
            "Cluster S1": ["Plant S1-A", "Plant S1-B", "Plant S1-C"],
            "Cluster S2": ["Plant S2-A"],
        },
    },
}


class Taxonomy(BaseModel):
    """Read-only location taxonomy shared by every request."""

    model_config = ConfigDict(frozen=True)

    companies: Tuple[str, ...]
    areas: Mapping[str, Mapping[str, Tuple[str, ...]]]

    @field_validator("areas", mode="after")
    @classmethod
    def freeze_areas(cls, value: Mapping[str, Mapping[str, Tuple[str, ...]]]):
        return MappingProxyType(
            {area: MappingProxyType(dict(clusters)) for area, clusters in value.items()}
        )

    def as_payload(self) -> dict:
        return {
            "companies": list(self.companies),
            "areas": {
                area: {cluster: list(plants) for cluster, plants in clusters.items()}
                for area, clusters in self.areas.items()
            },
        }


def load_taxonomy(path: str | None = None) -> Taxonomy:
    if not path:
        return Taxonomy.model_validate(DEFAULT_TAXONOMY)
    source = Path(path).expanduser()
    taxonomy = Taxonomy.model_validate(json.loads(source.read_text(encoding="utf-8")))
    logger.info("taxonomy_loaded", extra={"event": "taxonomy_loaded", "path": str(source)})
    return taxonomy


@lru_cache(maxsize=1)
def get_taxonomy() -> Taxonomy:
    return load_taxonomy(settings.taxonomy_file)
