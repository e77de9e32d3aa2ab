"""
Collection queries
Filtered, paginated listing against the collection endpoint
"""

import json
import logging
from typing import Any, Dict, List, Optional

import pydantic

from .client import LeanCloudClient
from .exceptions import QueryFailed, ValidationError
from .models import PageRequest, Record, RecordPage

logger = logging.getLogger(__name__)

LATEST_FIRST = "-uploadDate"


def encode_where(where: Dict[str, Any]) -> str:
    """JSON-encode a ``where`` predicate the way the REST API expects it"""
    return json.dumps(where, separators=(",", ":"), ensure_ascii=False)


class QueryLayer:
    """Direct GET queries on the collection endpoint"""

    def __init__(self, client: LeanCloudClient):
        self.client = client
        self.config = client.config

    async def _results(self, params: Dict[str, Any]) -> List[Record]:
        url = self.config.collection_endpoint
        body = await self.client.get(url, QueryFailed, params=params)
        if not isinstance(body, dict) or not isinstance(body.get("results"), list):
            raise QueryFailed(
                "Malformed response",
                url=url,
                request={"method": "GET", "params": params},
                body=body,
            )
        return body["results"]

    async def query_by_where(self, where: Dict[str, Any], page_number: int = 0) -> RecordPage:
        """
        Query one page of records matching a filter, newest upload first

        Args:
            where: Filter predicate, e.g. ``{"genre": "scifi"}``
            page_number: Zero-based page, 50 records per page

        Returns:
            RecordPage with records in server order

        Raises:
            QueryFailed: If the response carries a top-level error
            ValidationError: If the page number is negative

        Example:
            >>> page = await queries.query_by_where({"author": "Liu"}, 2)
            >>> len(page.records) <= 50
            True
        """
        try:
            request = PageRequest(where=where, page_number=page_number)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid page request: {e}")

        params = {
            "where": encode_where(request.where),
            "order": LATEST_FIRST,
            "limit": request.limit,
            "skip": request.skip,
        }
        records = await self._results(params)
        logger.debug("query page %d returned %d records", request.page_number, len(records))
        return RecordPage(records=records, page_number=request.page_number)

    async def get_object_by_item_id(self, item_id: Any) -> Optional[Record]:
        """Fetch the record whose ``id`` field equals ``item_id``, or None"""
        records = await self._results({"where": encode_where({"id": item_id})})
        return records[0] if records else None

    async def list_latest(self, limit: int = 1000) -> List[Record]:
        """Most recently uploaded records, up to ``limit``"""
        if limit < 1:
            raise ValidationError("limit must be positive")
        return await self._results({
            "order": LATEST_FIRST,
            "limit": limit,
            "skip": 0,
        })
