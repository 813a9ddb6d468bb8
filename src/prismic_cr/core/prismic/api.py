"""HTTP client for the Prismic content API.

Fetches the API entry document (refs, bookmarks, types, forms) and submits
search forms. Used by the transport facade; every httpx error is converted to
a PrismicApiError subclass here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

import httpx

from prismic_cr.core.prismic.document import Document
from prismic_cr.core.prismic.exceptions import (
    ApiConnectionError,
    ApiRequestError,
    ApiResponseError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
# Largest pageSize the search endpoint accepts
MAX_PAGE_SIZE = 100


def _request(client: httpx.Client, url: str, params: dict[str, Any]) -> httpx.Response:
    try:
        resp = client.get(url, params=params)
        resp.raise_for_status()
        return resp
    except httpx.HTTPStatusError as e:
        raise ApiRequestError(e.response.status_code, url) from e
    except httpx.TransportError as e:
        raise ApiConnectionError(f"Could not reach {url}: {e}") from e


def _request_json(client: httpx.Client, url: str, params: dict[str, Any]) -> dict[str, Any]:
    resp = _request(client, url, params)
    try:
        data = resp.json()
    except ValueError as e:
        raise ApiResponseError(f"Invalid JSON from {url}: {e}") from e
    if not isinstance(data, dict):
        raise ApiResponseError(f"Expected a JSON object from {url}, got {type(data).__name__}")
    return data


@dataclass(frozen=True, slots=True)
class Ref:
    """A content release reference.

    Attributes:
        id: Release identifier.
        ref: The token passed as ``ref`` to search forms.
        label: Human-readable label.
        is_master: Whether this is the master (published) ref.
    """

    id: str
    ref: str
    label: str = ""
    is_master: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Ref:
        return cls(
            id=data.get("id", ""),
            ref=data["ref"],
            label=data.get("label", ""),
            is_master=bool(data.get("isMasterRef", False)),
        )


@dataclass(frozen=True, slots=True)
class SearchResponse:
    """One page of search results."""

    results: list[Document]
    page: int = 1
    results_per_page: int = 0
    total_results_size: int = 0
    total_pages: int = 1
    next_page: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SearchResponse:
        results = data.get("results")
        if not isinstance(results, list):
            raise ApiResponseError("Search response without a 'results' list")
        return cls(
            results=[Document.from_dict(item) for item in results],
            page=int(data.get("page", 1)),
            results_per_page=int(data.get("results_per_page", len(results))),
            total_results_size=int(data.get("total_results_size", len(results))),
            total_pages=int(data.get("total_pages", 1)),
            next_page=data.get("next_page"),
        )


@dataclass(frozen=True)
class SearchForm:
    """A search form of the API, with its current parameter values.

    Setters return a new form, so a form obtained from ``PrismicApi.form``
    can be reused as a template::

        docs = api.form("everything").ref(api.master()).query(q).submit_all()
    """

    api: PrismicApi = field(repr=False, compare=False)
    name: str
    action: str
    fields: dict[str, dict[str, Any]] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)

    def set(self, key: str, value: Any) -> SearchForm:
        """Return a copy with ``key`` set to ``value``."""
        return replace(self, data={**self.data, key: value})

    def ref(self, ref: Ref | str) -> SearchForm:
        return self.set("ref", ref.ref if isinstance(ref, Ref) else ref)

    def query(self, q: str) -> SearchForm:
        return self.set("q", q)

    def orderings(self, orderings: str) -> SearchForm:
        return self.set("orderings", orderings)

    def page_size(self, page_size: int) -> SearchForm:
        return self.set("pageSize", page_size)

    def page(self, page: int) -> SearchForm:
        return self.set("page", page)

    def submit(self) -> SearchResponse:
        """Submit the form and return one page of results.

        Raises:
            ValueError: If no ref was set.
            PrismicApiError: On HTTP, connection or payload errors.
        """
        if "ref" not in self.data:
            raise ValueError(f"Form '{self.name}' needs a ref before submit()")
        params = {k: v for k, v in self.data.items() if v is not None}
        logger.debug("Submitting form '%s' with %s", self.name, params)
        payload = self.api.get_json(self.action, params)
        return SearchResponse.from_dict(payload)

    def submit_all(self) -> list[Document]:
        """Submit the form page by page, largest pages first, and return every result."""
        form = self.page_size(MAX_PAGE_SIZE)
        page = 1
        documents: list[Document] = []
        while True:
            response = form.page(page).submit()
            documents.extend(response.results)
            if page >= response.total_pages or not response.results:
                break
            page += 1
        return documents


class PrismicApi:
    """Entry point of a Prismic repository API.

    Use ``PrismicApi.get(endpoint)`` to fetch the entry document.
    """

    def __init__(
        self,
        endpoint: str,
        data: dict[str, Any],
        http_client: httpx.Client,
        access_token: str | None = None,
    ):
        self._endpoint = endpoint
        self._data = data
        self._http = http_client
        self._access_token = access_token
        try:
            self._refs = [Ref.from_dict(r) for r in data.get("refs") or []]
        except (KeyError, TypeError, AttributeError) as e:
            raise ApiResponseError(f"Malformed refs in API document of {endpoint}: {e!r}") from e

    @classmethod
    def get(
        cls,
        endpoint: str,
        access_token: str | None = None,
        *,
        http_client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> PrismicApi:
        """Fetch the API entry document from ``endpoint``.

        Raises:
            ApiRequestError: The endpoint answered with an HTTP error
                (typically an unknown repository).
            ApiConnectionError: The endpoint could not be reached.
            ApiResponseError: The entry document is not readable.
        """
        owns_client = http_client is None
        client = http_client or httpx.Client(
            timeout=timeout,
            headers={"Accept": "application/json"},
        )
        params = {"access_token": access_token} if access_token else {}
        try:
            data = _request_json(client, endpoint, params)
            api = cls(endpoint, data, client, access_token)
        except Exception:
            if owns_client:
                client.close()
            raise
        logger.debug("Fetched Prismic API entry document from %s", endpoint)
        return api

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def http(self) -> httpx.Client:
        """The underlying httpx client."""
        return self._http

    def get_json(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        """GET a JSON object, adding the access token when one is configured."""
        if self._access_token:
            params = {**params, "access_token": self._access_token}
        return _request_json(self._http, url, params)

    def get_bytes(self, url: str) -> bytes:
        """GET a binary resource (e.g. an image view)."""
        return _request(self._http, url, {}).content

    def refs(self) -> list[Ref]:
        return list(self._refs)

    def master(self) -> Ref:
        """Return the master ref.

        Raises:
            ApiResponseError: If the entry document has no master ref.
        """
        for ref in self._refs:
            if ref.is_master:
                return ref
        raise ApiResponseError(f"No master ref in API document of {self._endpoint}")

    def bookmarks(self) -> dict[str, str]:
        return dict(self._data.get("bookmarks") or {})

    def types(self) -> dict[str, str]:
        return dict(self._data.get("types") or {})

    def tags(self) -> list[str]:
        return list(self._data.get("tags") or [])

    def forms(self) -> dict[str, SearchForm]:
        return {name: self.form(name) for name in (self._data.get("forms") or {})}

    def form(self, name: str) -> SearchForm:
        """Return a fresh search form with the declared default values.

        Raises:
            ApiResponseError: If the API declares no form with that name.
        """
        spec = (self._data.get("forms") or {}).get(name)
        if not spec or "action" not in spec:
            raise ApiResponseError(f"API of {self._endpoint} has no form '{name}'")
        fields = spec.get("fields") or {}
        defaults = {key: f["default"] for key, f in fields.items() if "default" in f}
        return SearchForm(api=self, name=name, action=spec["action"], fields=fields, data=defaults)

    def close(self) -> None:
        """Close the HTTP client."""
        self._http.close()


__all__ = [
    "DEFAULT_TIMEOUT",
    "MAX_PAGE_SIZE",
    "PrismicApi",
    "Ref",
    "SearchForm",
    "SearchResponse",
]
