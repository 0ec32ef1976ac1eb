"""Import all models so SQLAlchemy metadata is fully registered."""

from checkin.db.base import Base

from checkin.models.admin_session import AdminSession
from checkin.models.checkin import CheckIn
from checkin.models.login_event import LoginEvent

__all__ = [
    "Base",
    "AdminSession",
    "CheckIn",
    "LoginEvent",
]
