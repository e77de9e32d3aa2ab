"""
Full-text search
Ranked object ids from the search endpoint, rehydrated through the batch endpoint
"""

import logging
from typing import Any, Dict, List, Optional

import pydantic

from .batch import BatchExecutor
from .client import LeanCloudClient
from .exceptions import SearchFailed, ValidationError
from .models import Record, RecordPage, SearchRequest

logger = logging.getLogger(__name__)

# The search endpoint orders by relevance score or by a date field, never both
ORDER_BY_SCORE = "score"

SEARCH_FIELDS = ("title", "subtitle")

RESERVED_CHARACTERS = frozenset('\\+-=&|><!(){}[]^"~*?:/')


def escape_keyword(keyword: str) -> str:
    """Backslash-escape query grammar operators inside a keyword"""
    return "".join(
        f"\\{char}" if char in RESERVED_CHARACTERS else char
        for char in keyword
    )


def build_search_query(
    keyword: str,
    genre_filter: Optional[str] = None,
    escape: bool = False
) -> Optional[str]:
    """
    Build the ``q`` parameter of a search request

    A single word is quoted for an exact match; several words are passed
    through and matched token by token. ``genre_filter`` is a raw query
    fragment joined with ``AND``.

    Returns:
        Query string, or None when the keyword is blank

    Example:
        >>> build_search_query("dune")
        '((title: "dune") OR (subtitle: "dune"))'
        >>> build_search_query("red mars", "genre:scifi")
        '((title: red mars) OR (subtitle: red mars)) AND genre:scifi'
    """
    keyword = keyword.strip()
    if not keyword:
        return None

    if escape:
        keyword = escape_keyword(keyword)
    if len(keyword.split()) == 1:
        keyword = f'"{keyword}"'

    clauses = " OR ".join(f"({field}: {keyword})" for field in SEARCH_FIELDS)
    query = f"({clauses})"
    if genre_filter:
        query = f"{query} AND {genre_filter}"
    return query


class SearchLayer:
    """Two-step search: ranked ids first, then full records in that order"""

    def __init__(self, client: LeanCloudClient, batch: BatchExecutor):
        self.client = client
        self.batch = batch
        self.config = client.config

    async def _ranked_object_ids(self, params: Dict[str, Any]) -> List[str]:
        url = self.config.search_endpoint
        body = await self.client.get(url, SearchFailed, params=params)
        if not isinstance(body, dict) or not isinstance(body.get("results"), list):
            raise SearchFailed(
                "Malformed response",
                url=url,
                request={"method": "GET", "params": params},
                body=body,
            )

        object_ids = []
        for hit in body["results"]:
            object_id = hit.get("objectId") if isinstance(hit, dict) else None
            if isinstance(object_id, str) and object_id:
                object_ids.append(object_id)
            else:
                logger.warning("search hit without a string objectId skipped: %s", hit)
        return object_ids

    async def _rehydrate(self, object_ids: List[str]) -> Dict[str, Record]:
        """Map each object id to its full record; failed fetches are left out"""
        outcomes = await self.batch.query_by_object_ids(object_ids)

        by_id = {}
        for object_id, outcome in zip(object_ids, outcomes):
            if not outcome.ok or not isinstance(outcome.value, dict):
                continue
            by_id[outcome.value.get("objectId") or object_id] = outcome.value
        return by_id

    async def full_text_search(
        self,
        keyword: str,
        genre_filter: Optional[str] = None,
        page_number: int = 0,
        escape: Optional[bool] = None
    ) -> RecordPage:
        """
        Search titles and subtitles

        Args:
            keyword: Search text; blank text returns an empty page without a request
            genre_filter: Optional query fragment, e.g. ``genre:scifi``
            page_number: Zero-based page, 50 hits per page
            escape: Escape operators in the keyword; defaults to the
                ``escape_search_keywords`` configuration value

        Returns:
            RecordPage whose records follow the relevance ranking, so
            ``records[i]`` answers ``object_ids[i]``. A hit that could not be
            fetched keeps its slot as ``None`` and is listed in ``missing``.

        Raises:
            SearchFailed: If the search call returns a top-level error
            BatchRequestFailed: If the rehydration call is rejected
        """
        try:
            request = SearchRequest(
                keyword=keyword,
                genre_filter=genre_filter,
                page_number=page_number,
            )
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid search request: {e}")

        if escape is None:
            escape = self.config.escape_search_keywords
        query = build_search_query(request.keyword, request.genre_filter, escape=escape)
        if query is None:
            return RecordPage(page_number=request.page_number)
        logger.debug("full text search query string: %s", query)

        object_ids = await self._ranked_object_ids({
            "q": query,
            "limit": request.limit,
            "skip": request.skip,
            "order": ORDER_BY_SCORE,
        })
        by_id = await self._rehydrate(object_ids)

        records = []
        missing = []
        for object_id in object_ids:
            record = by_id.get(object_id)
            if record is None:
                missing.append(object_id)
            records.append(record)
        if missing:
            logger.warning("%d search hits could not be fetched: %s", len(missing), missing)

        return RecordPage(
            records=records,
            page_number=request.page_number,
            object_ids=object_ids,
            missing=missing,
        )
