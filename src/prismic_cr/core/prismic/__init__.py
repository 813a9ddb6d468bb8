"""Minimal Prismic content API client (entry document, refs, forms, documents)."""

from prismic_cr.core.prismic.api import (
    DEFAULT_TIMEOUT,
    MAX_PAGE_SIZE,
    PrismicApi,
    Ref,
    SearchForm,
    SearchResponse,
)
from prismic_cr.core.prismic.document import Document
from prismic_cr.core.prismic.exceptions import (
    ApiConnectionError,
    ApiRequestError,
    ApiResponseError,
    PrismicApiError,
)
from prismic_cr.core.prismic.fragments import (
    DateFragment,
    Fragment,
    ImageFragment,
    ImageViewFragment,
    NumberFragment,
    TextFragment,
    parse_fragment,
)

__all__ = [
    "DEFAULT_TIMEOUT",
    "MAX_PAGE_SIZE",
    "PrismicApi",
    "Ref",
    "SearchForm",
    "SearchResponse",
    "Document",
    "PrismicApiError",
    "ApiConnectionError",
    "ApiRequestError",
    "ApiResponseError",
    "DateFragment",
    "Fragment",
    "ImageFragment",
    "ImageViewFragment",
    "NumberFragment",
    "TextFragment",
    "parse_fragment",
]
