"""Stream classes for the Notion markdown tap.

Two kinds of streams live here:

- Fetch streams (`BlockChildrenStream`, `PageDetailsStream`,
  `DatabaseQueryStream`) wrap single Notion endpoints. They are not part of
  the catalog; `NotionContentClient` calls them to serve the crawler.
- `MarkdownPagesStream` is the stream the tap exposes. It crawls the
  configured root pages and databases and emits one record per crawled page.
"""

from __future__ import annotations

import decimal
import typing as t

from singer_sdk import Stream
from singer_sdk import typing as th  # JSON Schema typing helpers

from .client import NotionStream
from .crawler import Crawler
from .models import CrawlSuccess, MetadataSource
from .render import render_page
from .serializers import merge_serializers

if t.TYPE_CHECKING:
    from singer_sdk import Tap
    from singer_sdk.helpers.types import Context

    from .models import CrawlingResult


class BlockChildrenStream(NotionStream):
    """Children of a block or page: GET /v1/blocks/{block_id}/children."""

    name = "block_children"
    path = "/blocks/{block_id}/children"
    primary_keys: t.ClassVar[list[str]] = ["id"]

    schema = th.PropertiesList(
        th.Property("object", th.StringType),
        th.Property("id", th.StringType),
        th.Property("type", th.StringType),
        th.Property("has_children", th.BooleanType),
        th.Property("created_time", th.DateTimeType),
        th.Property("last_edited_time", th.DateTimeType),
        th.Property("parent", th.ObjectType()),
    ).to_dict()


class PageDetailsStream(NotionStream):
    """Page object with properties: GET /v1/pages/{page_id}."""

    name = "page_details"
    path = "/pages/{page_id}"
    primary_keys: t.ClassVar[list[str]] = ["id"]

    schema = th.PropertiesList(
        th.Property("object", th.StringType),
        th.Property("id", th.StringType),
        th.Property("created_time", th.DateTimeType),
        th.Property("last_edited_time", th.DateTimeType),
        th.Property("parent", th.ObjectType()),
        th.Property("properties", th.ObjectType()),
        th.Property("url", th.StringType),
    ).to_dict()

    def get_url_params(self, context, next_page_token):  # type: ignore[override]
        """Return no query parameters.

        The page endpoint returns a single object and rejects ``page_size``
        and ``start_cursor``.
        """
        return {}

    def parse_response(self, response):  # type: ignore[override]
        """Yield the page object, which is the whole response body."""
        yield response.json(parse_float=decimal.Decimal)


class DatabaseQueryStream(NotionStream):
    """Records of a database: POST /v1/databases/{database_id}/query."""

    name = "database_query"
    path = "/databases/{database_id}/query"
    rest_method = "POST"
    primary_keys: t.ClassVar[list[str]] = ["id"]

    schema = PageDetailsStream.schema

    def prepare_request_payload(
        self,
        context: Context | None,
        next_page_token: t.Any | None,
    ) -> dict | None:
        """Put the cursor and page size in the JSON body, as Notion expects."""
        payload: dict[str, t.Any] = {"page_size": self.page_size}
        if next_page_token:
            payload["start_cursor"] = next_page_token
        return payload


class NotionContentClient:
    """Content collaborator for `Crawler`, backed by the Notion REST API.

    Every method exhausts pagination before returning. Rate-limited requests
    are retried by the fetch streams; anything else they raise propagates to
    the crawler, which reports the page as failed.
    """

    def __init__(self, tap: Tap) -> None:
        self.blocks = BlockChildrenStream(tap)
        self.pages = PageDetailsStream(tap)
        self.databases = DatabaseQueryStream(tap)

    def fetch_blocks(self, block_id: str) -> list[dict]:
        return list(self.blocks.request_records({"block_id": block_id}))

    def fetch_page(self, page_id: str) -> dict:
        for record in self.pages.request_records({"page_id": page_id}):
            return record
        msg = f"Notion returned no page for {page_id}."
        raise LookupError(msg)

    def fetch_database_records(self, database_id: str) -> list[dict]:
        return list(self.databases.request_records({"database_id": database_id}))


def page_url(source: MetadataSource) -> dict[str, t.Any]:
    """Metadata builder that keeps the Notion URL of the page, when known."""
    return {"url": source.source.get("url")}


class MarkdownPagesStream(Stream):
    """Crawled pages rendered as markdown.

    Crawls every id in ``page_ids`` and ``database_ids`` and emits one record
    per visited page, including child pages, child databases and database
    records. Failed pages are emitted too, with ``success`` set to false and
    a ``reason``.
    """

    name = "pages"
    primary_keys: t.ClassVar[list[str]] = ["id"]
    # Always a full crawl; there is no incremental state.
    replication_key = None

    schema = th.PropertiesList(
        th.Property("id", th.StringType, required=True),
        th.Property("parent_id", th.StringType),
        th.Property("success", th.BooleanType, required=True),
        th.Property("title", th.StringType),
        th.Property("created_time", th.DateTimeType),
        th.Property("last_edited_time", th.DateTimeType),
        th.Property("url", th.StringType),
        th.Property("properties", th.ArrayType(th.StringType)),
        th.Property("lines", th.ArrayType(th.StringType)),
        th.Property("content", th.StringType, description="Rendered markdown document"),
        th.Property("reason", th.StringType, description="Why the page failed"),
    ).to_dict()

    def __init__(self, tap: Tap, *args: t.Any, **kwargs: t.Any) -> None:
        super().__init__(tap, *args, **kwargs)
        self.content_client = NotionContentClient(tap)

    def build_crawler(self) -> Crawler:
        """Create a crawler from the tap configuration."""
        url_mask = self.config.get("url_mask")
        serializers = merge_serializers(
            url_mask=url_mask,
            minimal=self.config.get("property_strategy", "minimal") != "full",
        )
        return Crawler(
            self.content_client,
            serializers=serializers,
            metadata_builder=page_url,
            skip_ids=self.config.get("skip_ids") or [],
            logger=self.logger,
        )

    def get_records(self, context: Context | None) -> t.Iterable[dict]:
        """Crawl the configured roots and yield a record per result.

        Args:
            context: Stream context (unused; this stream has no parent).

        Yields:
            dict: One record per crawled page, success or failure.
        """
        crawler = self.build_crawler()

        for page_id in self.config.get("page_ids") or []:
            self.logger.info("Crawling page %s", page_id)
            for result in crawler.crawl(page_id):
                yield self.result_to_record(result)

        for database_id in self.config.get("database_ids") or []:
            self.logger.info("Crawling database %s", database_id)
            for result in crawler.crawl_database(database_id):
                yield self.result_to_record(result)

    @staticmethod
    def result_to_record(result: CrawlingResult) -> dict:
        """Flatten a crawl result into a stream record."""
        if isinstance(result, CrawlSuccess):
            page = result.page
            metadata = page.metadata.to_dict()
            return {
                "id": result.id,
                "parent_id": metadata["parent_id"],
                "success": True,
                "title": metadata["title"],
                "created_time": metadata["created_time"],
                "last_edited_time": metadata["last_edited_time"],
                "url": metadata.get("url"),
                "properties": list(page.properties),
                "lines": list(page.lines),
                "content": render_page(page),
                "reason": None,
            }

        return {
            "id": result.id,
            "parent_id": result.parent_id,
            "success": False,
            "reason": result.reason,
        }
