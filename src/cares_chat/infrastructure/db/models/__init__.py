"""Import all models so Base.metadata sees every table."""
from cares_chat.infrastructure.db.models.account import CounselorModel, StudentModel
from cares_chat.infrastructure.db.models.message import MessageModel
from cares_chat.infrastructure.db.models.schema_version import SchemaVersionModel

__all__ = [
    "CounselorModel",
    "MessageModel",
    "SchemaVersionModel",
    "StudentModel",
]
