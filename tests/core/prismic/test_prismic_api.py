"""Tests for the Prismic HTTP client."""

import httpx
import pytest

from prismic_cr.core.prismic import PrismicApi
from prismic_cr.core.prismic.api import MAX_PAGE_SIZE, Ref, SearchResponse
from prismic_cr.core.prismic.exceptions import ApiConnectionError, ApiRequestError, ApiResponseError
from tests.utils import ENDPOINT, IMAGE_BYTES, IMAGE_URL, MASTER_REF, FakePrismic, make_document


@pytest.fixture
def api(http_client) -> PrismicApi:
    return PrismicApi.get(ENDPOINT, http_client=http_client)


class TestEntryDocument:
    """Test fetching and reading the API entry document."""

    def test_master_ref(self, api: PrismicApi):
        master = api.master()
        assert master == Ref("master", MASTER_REF, "Master", True)
        assert len(api.refs()) == 2

    def test_tables(self, api: PrismicApi):
        assert api.bookmarks() == {"home": "a1"}
        assert api.types() == {"page": "Page", "article": "Article"}
        assert api.tags() == ["featured"]
        assert list(api.forms()) == ["everything"]
        assert api.endpoint == ENDPOINT

    def test_access_token_is_sent(self, fake_prismic: FakePrismic, http_client):
        PrismicApi.get(ENDPOINT, "secret", http_client=http_client)
        assert fake_prismic.params_of(fake_prismic.api_requests[-1]) == {"access_token": "secret"}

    def test_unknown_repository(self, http_client):
        with pytest.raises(ApiRequestError) as exc_info:
            PrismicApi.get("https://nope.cdn.prismic.io/api", http_client=http_client)
        assert exc_info.value.status_code == 404

    def test_unreachable_endpoint(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(refuse))
        with pytest.raises(ApiConnectionError, match="Could not reach"):
            PrismicApi.get(ENDPOINT, http_client=client)

    def test_invalid_json(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html>")))
        with pytest.raises(ApiResponseError, match="Invalid JSON"):
            PrismicApi.get(ENDPOINT, http_client=client)

    def test_not_an_object(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[1, 2])))
        with pytest.raises(ApiResponseError, match="Expected a JSON object"):
            PrismicApi.get(ENDPOINT, http_client=client)

    def test_no_master_ref(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"refs": []})))
        api = PrismicApi.get(ENDPOINT, http_client=client)
        with pytest.raises(ApiResponseError, match="No master ref"):
            api.master()

    def test_malformed_refs(self):
        client = httpx.Client(
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"refs": [{"isMasterRef": True}]}))
        )
        with pytest.raises(ApiResponseError, match="Malformed refs"):
            PrismicApi.get(ENDPOINT, http_client=client)
        assert not client.is_closed

    def test_unknown_form(self, api: PrismicApi):
        with pytest.raises(ApiResponseError, match="no form 'products'"):
            api.form("products")


class TestSearchForm:
    """Test building and submitting search forms."""

    def test_defaults_come_from_form_fields(self, api: PrismicApi):
        form = api.form("everything")
        assert form.data == {"page": "1", "pageSize": "20"}

    def test_setters_return_copies(self, api: PrismicApi):
        base = api.form("everything")
        derived = base.ref(api.master()).query("[]")
        assert "ref" not in base.data
        assert derived.data["ref"] == MASTER_REF
        assert derived.data["q"] == "[]"

    def test_submit_needs_ref(self, api: PrismicApi):
        with pytest.raises(ValueError, match="needs a ref"):
            api.form("everything").submit()

    def test_submit(self, api: PrismicApi):
        response = api.form("everything").ref(MASTER_REF).submit()
        assert isinstance(response, SearchResponse)
        assert [d.id for d in response.results] == ["a1", "a2"]
        assert response.total_results_size == 2

    def test_submit_with_query(self, api: PrismicApi):
        form = api.form("everything").ref(MASTER_REF).query('[[:d = at(document.id, "a2")]]')
        assert [d.id for d in form.submit().results] == ["a2"]

    def test_submit_all_walks_pages(self, http_client, fake_prismic: FakePrismic):
        fake_prismic.documents = [make_document(f"d{i}") for i in range(MAX_PAGE_SIZE + 5)]
        api = PrismicApi.get(ENDPOINT, http_client=http_client)

        documents = api.form("everything").ref(MASTER_REF).submit_all()

        assert len(documents) == MAX_PAGE_SIZE + 5
        pages = [fake_prismic.params_of(r)["page"] for r in fake_prismic.search_requests]
        assert pages == ["1", "2"]
        assert {fake_prismic.params_of(r)["pageSize"] for r in fake_prismic.search_requests} == {"100"}

    def test_search_error(self, api: PrismicApi, fake_prismic: FakePrismic):
        fake_prismic.search_status = 500
        with pytest.raises(ApiRequestError) as exc_info:
            api.form("everything").ref(MASTER_REF).submit()
        assert exc_info.value.status_code == 500

    def test_response_without_results(self):
        with pytest.raises(ApiResponseError, match="without a 'results' list"):
            SearchResponse.from_dict({"page": 1})

    def test_access_token_added_to_searches(self, fake_prismic: FakePrismic, http_client):
        api = PrismicApi.get(ENDPOINT, "secret", http_client=http_client)
        api.form("everything").ref(MASTER_REF).submit()
        assert fake_prismic.params_of(fake_prismic.search_requests[-1])["access_token"] == "secret"


class TestBinaryDownload:
    """Test downloading image views."""

    def test_get_bytes(self, api: PrismicApi):
        assert api.get_bytes(IMAGE_URL) == IMAGE_BYTES
