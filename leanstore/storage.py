"""
High-level storage interface for LeanStore
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import httpx

from .batch import BatchExecutor
from .client import LeanCloudClient
from .config import Configuration
from .models import BatchOutcome, LogicalOperation, Patch, Record, RecordPage
from .query import QueryLayer
from .search import SearchLayer


class LeanStorage:
    """
    High-level interface to one LeanCloud table

    Example:
        >>> config = Configuration.from_credentials(
        ...     app_id="abc", app_key="secret", table_name="Books"
        ... )
        >>> async with LeanStorage(config) as storage:
        ...     page = await storage.query_by_where({"genre": "scifi"}, 0)
        ...     hits = await storage.full_text_search("dune")
    """

    def __init__(
        self,
        config: Optional[Configuration] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize LeanStorage

        Args:
            config: Client configuration (default: loaded from LEANCLOUD_* environment)
            http_client: Optional httpx.AsyncClient to send requests with
        """
        self.config = config or Configuration.from_env()

        self.client = LeanCloudClient(self.config, http_client=http_client)
        self.batch = BatchExecutor(self.client)
        self.queries = QueryLayer(self.client)
        self.searches = SearchLayer(self.client, self.batch)

    async def __aenter__(self) -> "LeanStorage":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it"""
        await self.client.aclose()

    # Batch

    async def execute_batch(self, operations: Sequence[LogicalOperation]) -> List[BatchOutcome]:
        """
        Run several operations in one batch request

        Args:
            operations: ``Get``, ``GetById``, ``Create`` or ``Update`` operations

        Returns:
            One ``Success`` or ``OperationFailed`` per operation, same order

        Example:
            >>> outcomes = await storage.execute_batch([
            ...     GetById(object_id="5f1a..."),
            ...     Update(object_id="5f1b...", body={"rating": 5}),
            ... ])
            >>> [outcome.ok for outcome in outcomes]
            [True, False]
        """
        return await self.batch.execute_batch(operations)

    async def query_by_ids(self, ids: Iterable[Any]) -> List[BatchOutcome]:
        """
        Fetch records by their ``id`` field

        Args:
            ids: Application-level ids

        Returns:
            One outcome per id; ``Success.value`` is the record, an id with
            no match is ``OperationFailed``

        Example:
            >>> outcomes = await storage.query_by_ids([101, 102])
            >>> outcomes[0].value["title"]
            'Dune'
        """
        return await self.batch.query_by_ids(ids)

    async def query_by_object_ids(self, object_ids: Iterable[str]) -> List[BatchOutcome]:
        """
        Fetch records by objectId

        Args:
            object_ids: Server-assigned object ids

        Returns:
            One outcome per object id, in the same order
        """
        return await self.batch.query_by_object_ids(object_ids)

    async def batch_update(self, patches: Iterable[Union[Patch, Mapping[str, Any]]]) -> List[BatchOutcome]:
        """
        Update several objects in one request (needs a write session token)

        Args:
            patches: ``Patch`` objects or ``{"objectId": ..., "body": {...}}`` mappings

        Returns:
            One outcome per patch, in the same order

        Example:
            >>> await storage.batch_update([{"objectId": "5f1a...", "body": {"rating": 5}}])
        """
        return await self.batch.batch_update(patches)

    async def batch_create(self, items: Iterable[Dict[str, Any]]) -> List[BatchOutcome]:
        """
        Create several objects in one request (needs a write session token)

        Args:
            items: Object bodies

        Returns:
            One outcome per item; ``Success.value`` holds the new ``objectId``
        """
        return await self.batch.batch_create(items)

    # Queries

    async def query_by_where(self, where: Dict[str, Any], page_number: int = 0) -> RecordPage:
        """
        Get one page of records matching a filter, newest upload first

        Args:
            where: Filter predicate
            page_number: Zero-based page (50 records per page)

        Returns:
            RecordPage

        Example:
            >>> page = await storage.query_by_where({"genre": "scifi"}, 2)
            >>> for record in page.records:
            ...     print(record["title"])
        """
        return await self.queries.query_by_where(where, page_number)

    async def get_object_by_item_id(self, item_id: Any) -> Optional[Record]:
        """
        Get the record whose ``id`` field equals ``item_id``

        Returns:
            The record, or None if nothing matches
        """
        return await self.queries.get_object_by_item_id(item_id)

    async def list_latest(self, limit: int = 1000) -> List[Record]:
        """
        Get the most recently uploaded records

        Args:
            limit: Maximum number of records
        """
        return await self.queries.list_latest(limit)

    # Search

    async def full_text_search(
        self,
        keyword: str,
        genre_filter: Optional[str] = None,
        page_number: int = 0,
        escape: Optional[bool] = None
    ) -> RecordPage:
        """
        Full-text search on title and subtitle

        Args:
            keyword: Search text (a single word is matched exactly)
            genre_filter: Optional query fragment joined with AND
            page_number: Zero-based page (50 hits per page)
            escape: Escape query operators in the keyword

        Returns:
            RecordPage in relevance order; a hit that could not be fetched
            is None in its slot

        Example:
            >>> page = await storage.full_text_search("dune", "genre:scifi")
            >>> page.object_ids
            ['5f1a...', '5f1c...']
        """
        return await self.searches.full_text_search(
            keyword,
            genre_filter=genre_filter,
            page_number=page_number,
            escape=escape,
        )

    def __repr__(self):
        return f"LeanStorage(app_id={self.config.app_id}, table_name={self.config.table_name})"
