"""
Full-text search: query building and ranked rehydration
"""

import httpx
import pytest

from leanstore import (
    BatchRequestFailed,
    Configuration,
    LeanStorage,
    SearchFailed,
    build_search_query,
)
from leanstore.search import escape_keyword

from .fakes import BATCH_PATH, SEARCH_PATH, object_store

BOOKS = {
    "o1": {"objectId": "o1", "title": "Dune"},
    "o2": {"objectId": "o2", "title": "Dune Messiah"},
    "o3": {"objectId": "o3", "title": "Children of Dune"},
}


def search_hits(*object_ids):
    return {"results": [{"objectId": oid, "_score": 10 - i} for i, oid in enumerate(object_ids)]}


class TestBuildSearchQuery:

    def test_single_word_is_quoted(self):
        assert build_search_query("hello") == '((title: "hello") OR (subtitle: "hello"))'

    def test_multiple_words_are_not_quoted(self):
        assert build_search_query("hello world") == "((title: hello world) OR (subtitle: hello world))"

    def test_keyword_is_trimmed(self):
        assert build_search_query("  dune \n") == '((title: "dune") OR (subtitle: "dune"))'

    def test_genre_filter_is_joined_with_and(self):
        query = build_search_query("x", "genre:scifi")

        assert query == '((title: "x") OR (subtitle: "x")) AND genre:scifi'

    def test_blank_keyword(self):
        assert build_search_query("   ") is None

    def test_escape(self):
        assert escape_keyword('a"b(c)') == 'a\\"b\\(c\\)'
        assert build_search_query('say "hi"', escape=True) == (
            '((title: say \\"hi\\") OR (subtitle: say \\"hi\\"))'
        )

    def test_no_escape_by_default(self):
        assert build_search_query("a OR b") == "((title: a OR b) OR (subtitle: a OR b))"


@pytest.mark.asyncio
class TestFullTextSearch:

    async def test_empty_keyword_makes_no_request(self, storage, server):
        page = await storage.full_text_search("", "genre:scifi", 0)

        assert page.records == []
        assert server.requests == []

    async def test_search_request_params(self, storage, server):
        server.on("GET", SEARCH_PATH, search_hits())

        await storage.full_text_search("hello", None, 3)

        params = server.requests[0].url.params
        assert params["clazz"] == "Books"
        assert params["q"] == '((title: "hello") OR (subtitle: "hello"))'
        assert params["limit"] == "50"
        assert params["skip"] == "150"
        assert params["order"] == "score"

    async def test_search_url_keeps_table_parameter(self, storage, server):
        server.on("GET", SEARCH_PATH, search_hits())

        await storage.full_text_search("dune")

        url = str(server.requests[0].url)
        assert url.startswith("https://testapp.api.lncldglobal.com/1.1/search/select?clazz=Books&q=")
        assert list(server.requests[0].url.params.keys()) == ["clazz", "q", "limit", "skip", "order"]

    async def test_genre_filter_reaches_query(self, storage, server):
        server.on("GET", SEARCH_PATH, search_hits())

        await storage.full_text_search("x", "genre:scifi", 0)

        assert server.requests[0].url.params["q"].endswith(" AND genre:scifi")

    async def test_results_follow_search_ranking(self, storage, server):
        server.on("GET", SEARCH_PATH, search_hits("o3", "o1", "o2"))
        server.on("POST", BATCH_PATH, object_store(BOOKS.values()))

        page = await storage.full_text_search("dune")

        assert [record["objectId"] for record in page.records] == ["o3", "o1", "o2"]
        assert page.object_ids == ["o3", "o1", "o2"]
        assert [sub["path"] for sub in server.batch_requests()] == [
            "/1.1/classes/Books/o3",
            "/1.1/classes/Books/o1",
            "/1.1/classes/Books/o2",
        ]

    async def test_ranking_survives_reordered_rehydration(self, storage, server):
        server.on("GET", SEARCH_PATH, search_hits("o1", "o2", "o3"))
        server.on("POST", BATCH_PATH, [
            {"success": BOOKS["o3"]},
            {"success": BOOKS["o1"]},
            {"success": BOOKS["o2"]},
        ])

        page = await storage.full_text_search("dune")

        assert page.records == [BOOKS["o1"], BOOKS["o2"], BOOKS["o3"]]

    async def test_unfetchable_hits_keep_their_slot(self, storage, server):
        server.on("GET", SEARCH_PATH, search_hits("o1", "gone", "o2"))
        server.on("POST", BATCH_PATH, object_store(BOOKS.values()))

        page = await storage.full_text_search("dune")

        assert page.records == [BOOKS["o1"], None, BOOKS["o2"]]
        assert len(page.records) == len(page.object_ids)
        assert page.object_ids == ["o1", "gone", "o2"]
        assert page.missing == ["gone"]
        assert page.to_dict() == {"list": [BOOKS["o1"], None, BOOKS["o2"]]}

    async def test_hits_without_string_object_id_are_skipped(self, storage, server):
        server.on("GET", SEARCH_PATH, {"results": [
            {"objectId": 123},
            {"objectId": "o1"},
            {"title": "no id"},
        ]})
        server.on("POST", BATCH_PATH, object_store(BOOKS.values()))

        page = await storage.full_text_search("dune")

        assert page.object_ids == ["o1"]
        assert page.records == [BOOKS["o1"]]
        assert [sub["path"] for sub in server.batch_requests()] == ["/1.1/classes/Books/o1"]

    async def test_no_hits(self, storage, server):
        server.on("GET", SEARCH_PATH, search_hits())

        page = await storage.full_text_search("nothing matches")

        assert page.records == []
        assert len(server.requests) == 1

    async def test_error_field_raises_search_failed(self, storage, server):
        server.on("GET", SEARCH_PATH, httpx.Response(
            403, json={"code": 403, "error": "Search not enabled."}
        ))

        with pytest.raises(SearchFailed) as exc_info:
            await storage.full_text_search("dune")

        assert exc_info.value.body["error"] == "Search not enabled."
        assert "/1.1/search/select" in exc_info.value.url

    async def test_rejected_rehydration_propagates(self, storage, server):
        server.on("GET", SEARCH_PATH, search_hits("o1"))
        server.on("POST", BATCH_PATH, {"code": 401, "error": "Unauthorized."})

        with pytest.raises(BatchRequestFailed):
            await storage.full_text_search("dune")

    async def test_escape_argument(self, storage, server):
        server.on("GET", SEARCH_PATH, search_hits())

        await storage.full_text_search("c++", escape=True)

        assert server.requests[0].url.params["q"] == '((title: "c\\+\\+") OR (subtitle: "c\\+\\+"))'

    async def test_escape_from_configuration(self, server):
        config = Configuration.from_credentials(
            app_id="testapp", app_key="k", table_name="Books", escape_search_keywords=True
        )
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(server.handler))
        server.on("GET", SEARCH_PATH, search_hits())

        async with LeanStorage(config, http_client=http_client) as storage:
            await storage.full_text_search("a:b")

        assert server.requests[0].url.params["q"] == '((title: "a\\:b") OR (subtitle: "a\\:b"))'
