"""
Data models for LeanStore

Logical batch operations, per-item outcomes and paging requests.
"""

from typing import Any, ClassVar, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .endpoints import class_path, object_path

PAGE_SIZE = 50

Record = Dict[str, Any]


# ============================================================================
#  LOGICAL OPERATIONS
# ============================================================================

class LogicalOperation(BaseModel):
    """One sub-request of a batch call"""

    model_config = ConfigDict(frozen=True)

    method: ClassVar[str] = "GET"
    is_write: ClassVar[bool] = False

    def to_request(self, table_name: str) -> Dict[str, Any]:
        """Serialize into a batch sub-request descriptor"""
        raise NotImplementedError


class Get(LogicalOperation):
    """Filtered list of a table, e.g. ``Get(where={"id": 42})``"""

    where: Dict[str, Any] = Field(default_factory=dict)

    def to_request(self, table_name: str) -> Dict[str, Any]:
        return {
            "method": self.method,
            "path": class_path(table_name),
            "params": {"where": self.where},
        }


class GetById(LogicalOperation):
    """Direct fetch of one object by its objectId"""

    object_id: str

    def to_request(self, table_name: str) -> Dict[str, Any]:
        return {
            "method": self.method,
            "path": object_path(table_name, self.object_id),
        }


class Create(LogicalOperation):
    method: ClassVar[str] = "POST"
    is_write: ClassVar[bool] = True

    body: Dict[str, Any]

    def to_request(self, table_name: str) -> Dict[str, Any]:
        return {
            "method": self.method,
            "path": class_path(table_name),
            "body": self.body,
        }


class Update(LogicalOperation):
    method: ClassVar[str] = "PUT"
    is_write: ClassVar[bool] = True

    object_id: str
    body: Dict[str, Any]

    def to_request(self, table_name: str) -> Dict[str, Any]:
        return {
            "method": self.method,
            "path": object_path(table_name, self.object_id),
            "body": self.body,
        }


class Patch(BaseModel):
    """Partial update for one object, accepts ``{"objectId": ..., "body": ...}``"""

    model_config = ConfigDict(populate_by_name=True)

    object_id: str = Field(..., alias="objectId")
    body: Dict[str, Any]


# ============================================================================
#  OUTCOMES
# ============================================================================

class Success(BaseModel):
    """Successful sub-request, ``value`` is the server payload"""

    ok: ClassVar[bool] = True

    value: Any = None

    def unwrap(self) -> Any:
        return self.value


class OperationFailed(BaseModel):
    """
    Failure marker for one sub-request

    The batch call itself succeeded; only the item at ``index`` failed.
    ``error`` keeps the raw element returned by the server for diagnostics.
    """

    ok: ClassVar[bool] = False

    index: int
    error: Any = None

    def unwrap(self) -> None:
        return None

    def __repr__(self):
        return f"OperationFailed(index={self.index}, error={self.error})"


BatchOutcome = Union[Success, OperationFailed]


# ============================================================================
#  PAGING
# ============================================================================

class PageRequest(BaseModel):
    """Filtered page of records, newest upload first"""

    where: Dict[str, Any] = Field(default_factory=dict)
    page_number: int = Field(0, ge=0)

    @property
    def limit(self) -> int:
        return PAGE_SIZE

    @property
    def skip(self) -> int:
        return PAGE_SIZE * self.page_number


class SearchRequest(BaseModel):
    """Full-text search page, ranked by relevance"""

    keyword: str
    genre_filter: Optional[str] = None
    page_number: int = Field(0, ge=0)

    @property
    def limit(self) -> int:
        return PAGE_SIZE

    @property
    def skip(self) -> int:
        return PAGE_SIZE * self.page_number


class RecordPage(BaseModel):
    """
    One page of records returned by a query or a search

    For a search, ``records`` is aligned with ``object_ids``; a hit whose
    record could not be fetched is ``None`` in its slot.
    """

    records: List[Optional[Record]] = Field(default_factory=list)
    page_number: int = 0
    object_ids: List[str] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def to_dict(self) -> Dict[str, Any]:
        """Envelope used by the web front end"""
        return {"list": self.records}

    def __repr__(self):
        return f"RecordPage(page={self.page_number}, records={len(self.records)}, missing={len(self.missing)})"
