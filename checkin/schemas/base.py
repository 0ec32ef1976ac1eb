from pydantic import BaseModel, ConfigDict


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CamelRequest(BaseModel):
    """Request bodies posted by the browser forms (camelCase keys)."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True, str_strip_whitespace=True)


class OkResponse(BaseModel):
    ok: bool = True


class DeletedResponse(OkResponse):
    deleted: int
