"""
LeanStore - async client for LeanCloud tables
Batched reads and writes, paginated queries and full-text search
"""

__version__ = "1.0.0"

from .storage import LeanStorage
from .config import Configuration, Settings
from .models import (
    PAGE_SIZE,
    BatchOutcome,
    Create,
    Get,
    GetById,
    LogicalOperation,
    OperationFailed,
    Patch,
    RecordPage,
    Success,
    Update,
)
from .search import build_search_query
from .exceptions import (
    LeanStoreError,
    ConfigurationInvalid,
    ValidationError,
    RequestFailed,
    BatchRequestFailed,
    QueryFailed,
    SearchFailed
)

__all__ = [
    "LeanStorage",
    "Configuration",
    "Settings",
    "PAGE_SIZE",
    "BatchOutcome",
    "LogicalOperation",
    "Get",
    "GetById",
    "Create",
    "Update",
    "Patch",
    "Success",
    "OperationFailed",
    "RecordPage",
    "build_search_query",
    "LeanStoreError",
    "ConfigurationInvalid",
    "ValidationError",
    "RequestFailed",
    "BatchRequestFailed",
    "QueryFailed",
    "SearchFailed"
]
