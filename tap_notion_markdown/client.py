"""REST client handling and NotionStream base class.

NotionStream specializes the Singer SDK's RESTStream for the Notion API and
is the base of every stream that talks HTTP in this tap:

- Base URL and HTTP headers (Notion-Version and an optional User-Agent).
- Bearer authentication with the Notion integration token.
- Cursor pagination over Notion's `{ "results": [...], "next_cursor": ... }`
  envelope.
- Retries with exponential backoff. The SDK treats HTTP 429 (rate limited)
  and 5xx responses as retriable; every other 4xx is fatal.

The fetch streams in `streams.py` are not synced on their own. The crawler
drives them through `NotionContentClient`, one request sequence per block,
page or database.
"""

from __future__ import annotations

import decimal
import sys
import typing as t

import backoff
from singer_sdk.authenticators import BearerTokenAuthenticator
from singer_sdk.helpers.jsonpath import extract_jsonpath
from singer_sdk.streams import RESTStream

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

if t.TYPE_CHECKING:
    from collections.abc import Generator

    import requests
    from singer_sdk.helpers.types import Context


DEFAULT_NOTION_VERSION = "2022-06-28"
DEFAULT_PAGE_SIZE = 100


class NotionStream(RESTStream):
    """Base stream for the Notion API."""

    records_jsonpath = "$.results[*]"
    next_page_token_jsonpath = "$.next_cursor"  # noqa: S105

    @override
    @property
    def url_base(self) -> str:
        """Return the Notion API base URL."""
        return "https://api.notion.com/v1"

    @override
    @property
    def authenticator(self) -> BearerTokenAuthenticator:
        """Return a new authenticator object using the Notion integration token."""
        return BearerTokenAuthenticator(token=self.config.get("auth_token", ""))

    @property
    @override
    def http_headers(self) -> dict:
        """Return the HTTP headers including Notion-Version and optional UA."""
        headers: dict[str, str] = {}
        headers["Notion-Version"] = self.config.get("notion_version") or DEFAULT_NOTION_VERSION
        user_agent = self.config.get("user_agent")
        if user_agent:
            headers["User-Agent"] = user_agent
        return headers

    @property
    def page_size(self) -> int:
        """Return the number of results requested per page (Notion allows up to 100)."""
        return self.config.get("page_size") or DEFAULT_PAGE_SIZE

    @override
    def get_url_params(
        self,
        context: Context | None,
        next_page_token: t.Any | None,
    ) -> dict[str, t.Any]:
        """Return URL parameters for Notion list endpoints.

        GET endpoints take ``page_size`` and ``start_cursor`` as query
        parameters. POST endpoints (database queries) take them in the JSON
        body instead, so no parameters are returned for them.

        Args:
            context: The stream context.
            next_page_token: The cursor from the previous response, or None
                for the first request.

        Returns:
            A dictionary of URL query parameters.
        """
        params: dict[str, t.Any] = {}
        if self.http_method.upper() != "POST":
            if next_page_token:
                params["start_cursor"] = next_page_token
            params["page_size"] = self.page_size
        return params

    @override
    def parse_response(self, response: requests.Response) -> t.Iterable[dict]:
        """Parse the response and return an iterator of result records.

        Numbers are parsed as ``Decimal`` so that property values keep their
        exact representation when rendered.

        Args:
            response: The HTTP ``requests.Response`` object.

        Yields:
            Each record from the source.
        """
        yield from extract_jsonpath(
            self.records_jsonpath,
            input=response.json(parse_float=decimal.Decimal),
        )

    @override
    def backoff_wait_generator(self) -> Generator[float, None, None]:
        """Wait 1s, 2s, 4s, ... between retries of a rate-limited request."""
        return backoff.expo(base=2, factor=1)
