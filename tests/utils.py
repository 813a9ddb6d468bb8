"""Test helpers and shared constants.

FakePrismic is an in-memory Prismic repository served through
``httpx.MockTransport``: it answers the API entry document, the
``everything`` search form (with ``q``, ``page`` and ``pageSize``) and image
downloads. Every request is recorded.
"""

import json
import math
import re
from copy import deepcopy
from typing import Any
from urllib.parse import parse_qs

import httpx

REPOSITORY = "test"
URI_TEMPLATE = "https://%s.cdn.prismic.io/api"
ENDPOINT = URI_TEMPLATE % REPOSITORY
SEARCH_URL = f"https://{REPOSITORY}.cdn.prismic.io/api/documents/search"
MASTER_REF = "WzQ7ZyAAACQAR4Ps"
IMAGE_URL = "https://images.prismic.io/test/welcome.png"
IMAGE_BYTES = b"\x89PNG fake image"

WELCOME = {
    "id": "a1",
    "type": "page",
    "href": f"{SEARCH_URL}?ref={MASTER_REF}&q=a1",
    "slugs": ["welcome", "home-page"],
    "tags": ["featured"],
    "data": {
        "page": {
            "title": {"type": "StructuredText", "value": [{"type": "heading1", "text": "Welcome"}]},
            "published": {"type": "Date", "value": "2024-03-01"},
            "rank": {"type": "Number", "value": 3},
            "illustration": {
                "type": "Image",
                "value": {
                    "main": {"url": IMAGE_URL, "alt": "Hello", "dimensions": {"width": 640, "height": 480}},
                    "views": {},
                },
            },
        }
    },
}

HELLO = {
    "id": "a2",
    "type": "article",
    "slugs": ["hello-world"],
    "tags": [],
    "data": {"article": {"body": {"type": "Text", "value": "Hello world"}}},
}


def api_document(bookmarks: dict[str, str], types: dict[str, str]) -> dict[str, Any]:
    """Return the API entry document of the fake repository."""
    return {
        "refs": [
            {"id": "master", "ref": MASTER_REF, "label": "Master", "isMasterRef": True},
            {"id": "release", "ref": "WzQ7release", "label": "Spring release"},
        ],
        "bookmarks": dict(bookmarks),
        "types": dict(types),
        "tags": ["featured"],
        "forms": {
            "everything": {
                "method": "GET",
                "enctype": "application/x-www-form-urlencoded",
                "action": SEARCH_URL,
                "fields": {
                    "ref": {"type": "String", "multiple": False},
                    "q": {"type": "String", "multiple": True},
                    "page": {"type": "Integer", "multiple": False, "default": "1"},
                    "pageSize": {"type": "Integer", "multiple": False, "default": "20"},
                },
            }
        },
    }


_ID_AT = re.compile(r'at\(document\.id, ("(?:[^"\\]|\\.)*")\)')
_ID_ANY = re.compile(r"any\(document\.id, (\[[^\]]*\])\)")
_TYPE_AT = re.compile(r'^\[\[:d = at\(document\.type, ("(?:[^"\\]|\\.)*")\)\]')


class FakePrismic:
    """In-memory Prismic repository."""

    def __init__(
        self,
        documents: list[dict[str, Any]] | None = None,
        bookmarks: dict[str, str] | None = None,
        types: dict[str, str] | None = None,
    ):
        self.documents = deepcopy(documents if documents is not None else [WELCOME, HELLO])
        self.bookmarks = dict(bookmarks if bookmarks is not None else {"home": "a1"})
        self.types = dict(types if types is not None else {"page": "Page", "article": "Article"})
        self.requests: list[httpx.Request] = []
        self.search_status = 200

    def client(self) -> httpx.Client:
        """Return an httpx client bound to this repository."""
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def params_of(self, request: httpx.Request) -> dict[str, str]:
        return {key: values[0] for key, values in parse_qs(request.url.query.decode()).items()}

    @property
    def api_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/api"]

    @property
    def search_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/api/documents/search"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "images.prismic.io":
            return httpx.Response(200, content=IMAGE_BYTES)
        if request.url.host != f"{REPOSITORY}.cdn.prismic.io":
            return httpx.Response(404, json={"error": "Repository not found"})
        if request.url.path == "/api":
            return httpx.Response(200, json=api_document(self.bookmarks, self.types))
        if request.url.path == "/api/documents/search":
            return self._search(request)
        return httpx.Response(404, json={"error": "Not found"})

    def _search(self, request: httpx.Request) -> httpx.Response:
        if self.search_status != 200:
            return httpx.Response(self.search_status, json={"error": "Search failed"})
        params = self.params_of(request)
        if params.get("ref") != MASTER_REF:
            return httpx.Response(400, json={"error": "Missing or unknown ref"})

        results = self._filter(params.get("q", ""))
        page_size = int(params.get("pageSize", "20"))
        page = int(params.get("page", "1"))
        start = (page - 1) * page_size
        return httpx.Response(
            200,
            json={
                "page": page,
                "results_per_page": page_size,
                "results_size": len(results[start : start + page_size]),
                "total_results_size": len(results),
                "total_pages": max(1, math.ceil(len(results) / page_size)),
                "next_page": None,
                "prev_page": None,
                "results": results[start : start + page_size],
            },
        )

    def _filter(self, q: str) -> list[dict[str, Any]]:
        documents = self.documents
        if m := _ID_AT.search(q):
            wanted = json.loads(m.group(1))
            documents = [d for d in documents if d["id"] == wanted]
        elif m := _ID_ANY.search(q):
            wanted = json.loads(m.group(1))
            documents = [d for d in documents if d["id"] in wanted]
        if m := _TYPE_AT.search(q):
            wanted = json.loads(m.group(1))
            documents = [d for d in documents if d["type"] == wanted]
        return deepcopy(documents)


def make_document(doc_id: str, doc_type: str = "page", **fragments: Any) -> dict[str, Any]:
    """Build a search-result entry with ``{"type", "value"}`` fragments."""
    return {
        "id": doc_id,
        "type": doc_type,
        "slugs": [doc_id.lower()],
        "tags": [],
        "data": {doc_type: dict(fragments)},
    }
