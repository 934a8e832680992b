"""Traversal engine: walks Notion pages and databases into `Page` results.

A crawl starts from a page (`Crawler.crawl`) or a database
(`Crawler.crawl_database`) and yields one result per visited page:

1. The page is fetched, its properties are serialized and its block listing
   is walked depth-first. Every block is serialized into an indented line
   on the page.
2. Synced blocks are replaced by the children of their source block, at the
   same depth.
3. Child pages and child databases are page boundaries. They are collected
   while the current page is walked and crawled only after the current
   page's own result has been yielded.
4. Any error raised while loading or walking a page is turned into a
   `CrawlFailure` for that page alone. Its siblings are still crawled.

Results are produced lazily; a consumer that stops iterating stops the
crawl.
"""

from __future__ import annotations

import logging
import re
import typing as t

from tap_notion_markdown import markdown as md
from tap_notion_markdown.models import (
    BlockType,
    CrawlFailure,
    CrawlingResult,
    CrawlSuccess,
    MalformedPageError,
    MetadataBuilder,
    MetadataSource,
    Page,
    PageMetadata,
    PropertyType,
)
from tap_notion_markdown.serializers import (
    Serializers,
    merge_serializers,
    serialize_block,
    serialize_properties,
)
from tap_notion_markdown.serializers.utils import plain_text

if t.TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


# Structural containers whose children keep the container's depth.
TRANSPARENT_BLOCK_TYPES = frozenset(
    {
        BlockType.TABLE.value,
        BlockType.TABLE_ROW.value,
        BlockType.COLUMN_LIST.value,
        BlockType.COLUMN.value,
    }
)

PAGE_BOUNDARY_TYPES = frozenset({BlockType.CHILD_PAGE.value, BlockType.CHILD_DATABASE.value})

_KNOWN_BLOCK_TYPES = frozenset(member.value for member in BlockType)

_UUID_HEX = re.compile(r"^[0-9a-f]{32}$")


class ContentClient(t.Protocol):
    """Read-only access to Notion content.

    Implementations return fully paginated results and handle rate limiting
    themselves. Errors they raise become page-level failures.
    """

    def fetch_blocks(self, block_id: str) -> list[dict]: ...

    def fetch_page(self, page_id: str) -> dict: ...

    def fetch_database_records(self, database_id: str) -> list[dict]: ...


IndentFunction = t.Callable[[str, int], str]


def extract_title(source: t.Mapping[str, t.Any]) -> str:
    """Return the plain text of the page's ``title`` property.

    Pages without a title property get an empty title.
    """
    for prop in (source.get("properties") or {}).values():
        if prop.get("type") == PropertyType.TITLE:
            return plain_text(prop.get("title"))
    return ""


def normalize_id(node_id: str) -> str:
    """Return ``node_id`` lowercased and without dashes, for comparisons."""
    return node_id.replace("-", "").lower()


def canonical_id(node_id: str) -> str:
    """Return a Notion id in the dashed form the API uses in its objects.

    Ids copied from Notion URLs have no dashes. Anything that is not a
    32-digit hex id is returned unchanged.
    """
    compact = normalize_id(node_id)
    if not _UUID_HEX.match(compact):
        return node_id
    return f"{compact[:8]}-{compact[8:12]}-{compact[12:16]}-{compact[16:20]}-{compact[20:]}"


def _reason(exc: Exception) -> str:
    message = str(exc)
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__


class Crawler:
    """Crawl Notion pages and databases into markdown `Page` records.

    Args:
        client: The content collaborator used for every fetch.
        serializers: Block and property strategies. Defaults to
            `merge_serializers` with ``url_mask`` applied.
        url_mask: Replacement for rendered hrefs when ``serializers`` is not
            given.
        metadata_builder: Called for every assembled page; the mapping it
            returns is merged into the page metadata.
        skip_ids: Page and database ids that are never fetched or emitted.
        indent: ``(text, depth) -> text`` used to indent nested lines.
        logger: Logger for failures and skipped nodes.
    """

    def __init__(
        self,
        client: ContentClient,
        *,
        serializers: Serializers | None = None,
        url_mask: str | None = None,
        metadata_builder: MetadataBuilder | None = None,
        skip_ids: Iterable[str] = (),
        indent: IndentFunction | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.serializers = serializers or merge_serializers(url_mask=url_mask)
        self.metadata_builder = metadata_builder
        self.skip_ids = frozenset(normalize_id(node_id) for node_id in skip_ids)
        self.indent = indent or md.indent
        self.logger = logger or logging.getLogger(__name__)

    # --- Entry points ----------------------------------------------------

    def crawl(self, page_id: str, parent: Page | None = None) -> Iterator[CrawlingResult]:
        """Crawl the page ``page_id`` and every page reachable below it.

        Args:
            page_id: The root page id, with or without dashes.
            parent: The page the root hangs under, if any.

        Yields:
            One result per visited page, in pre-order.
        """
        parent_id = parent.metadata.id if parent else None
        yield from self._crawl_page(canonical_id(page_id), parent_id, parent)

    def crawl_database(
        self,
        database_id: str,
        parent: Page | None = None,
        *,
        title: str = "",
        source: dict | None = None,
    ) -> Iterator[CrawlingResult]:
        """Crawl every record of the database ``database_id``.

        When ``parent`` is given the database itself is emitted first as a
        page with metadata only, so that it has a place in the page tree.

        Args:
            database_id: The database id.
            parent: The page containing the database, if any.
            title: Title of the database shell page.
            source: The Notion object describing the database (for instance
                its ``child_database`` block), used for timestamps.

        Yields:
            The shell result, then the results of every record.
        """
        database_id = canonical_id(database_id)
        if self._skipped(database_id):
            return

        parent_id = parent.metadata.id if parent else None
        try:
            records = self.client.fetch_database_records(database_id)
            shell = None
            if parent is not None:
                shell = self.init_page(source or {"id": database_id}, title, parent)
        except Exception as exc:
            yield self._failure(database_id, parent_id, exc)
            return

        if shell is not None:
            database_id = shell.metadata.id
            yield CrawlSuccess(id=database_id, page=shell)

        for record in records:
            record_id = record["id"] if isinstance(record, dict) else record
            yield from self._crawl_page(record_id, database_id, shell)

    # --- Page assembly ---------------------------------------------------

    def init_page(
        self,
        source: t.Mapping[str, t.Any],
        title: str,
        parent: Page | None = None,
        properties: list[str] | None = None,
        *,
        parent_id: str | None = None,
    ) -> Page:
        """Build an empty `Page` for ``source``.

        ``parent_id`` defaults to the id of ``parent``. The configured
        metadata builder, if any, contributes extra metadata fields.
        """
        properties = list(properties or [])
        if parent_id is None and parent is not None:
            parent_id = parent.metadata.id

        metadata = PageMetadata(
            id=source["id"],
            title=title,
            created_time=source.get("created_time"),
            last_edited_time=source.get("last_edited_time"),
            parent_id=parent_id,
        )
        if self.metadata_builder is not None:
            extra = self.metadata_builder(
                MetadataSource(
                    source=dict(source),
                    title=title,
                    properties=tuple(properties),
                    parent=parent,
                )
            )
            metadata.extra.update(extra or {})

        return Page(metadata=metadata, properties=properties)

    # --- Page boundaries -------------------------------------------------

    def _crawl_page(
        self,
        page_id: str,
        parent_id: str | None,
        parent: Page | None,
    ) -> Iterator[CrawlingResult]:
        if self._skipped(page_id):
            return

        try:
            source = self.client.fetch_page(page_id)
            if "parent" not in source:
                raise MalformedPageError(f"Unexpected Notion page object for {page_id}.")
            title = extract_title(source)
            properties = serialize_properties(self.serializers.property, source.get("properties"))
            page = self.init_page(source, title, parent, properties, parent_id=parent_id)
            discovered = self._walk_page(page, source["id"])
        except Exception as exc:
            yield self._failure(page_id, parent_id, exc)
            return

        yield CrawlSuccess(id=page.metadata.id, page=page)
        yield from self._crawl_discovered(page, discovered)

    def _crawl_child_page(self, block: dict, parent: Page) -> Iterator[CrawlingResult]:
        block_id = block["id"]
        if self._skipped(block_id):
            return

        try:
            title = (block.get(BlockType.CHILD_PAGE.value) or {}).get("title") or ""
            page = self.init_page(block, title, parent)
            discovered = self._walk_page(page, block_id)
        except Exception as exc:
            yield self._failure(block_id, parent.metadata.id, exc)
            return

        yield CrawlSuccess(id=page.metadata.id, page=page)
        yield from self._crawl_discovered(page, discovered)

    def _crawl_discovered(self, page: Page, discovered: list[dict]) -> Iterator[CrawlingResult]:
        for block in discovered:
            if block["type"] == BlockType.CHILD_DATABASE:
                title = (block.get(BlockType.CHILD_DATABASE.value) or {}).get("title") or ""
                yield from self.crawl_database(block["id"], page, title=title, source=block)
            else:
                yield from self._crawl_child_page(block, page)

    # --- Block walking ---------------------------------------------------

    def _walk_page(self, page: Page, block_id: str) -> list[dict]:
        """Walk the body of ``page`` and return the page boundaries found."""
        discovered: list[dict] = []
        self._walk(page, self.client.fetch_blocks(block_id), discovered, depth=0)
        return discovered

    def _walk(self, page: Page, blocks: Iterable[dict], discovered: list[dict], depth: int) -> None:
        for block in blocks:
            block_type = block.get("type")
            if block_type not in _KNOWN_BLOCK_TYPES:
                self.logger.debug("Skipping block %s with type %r.", block.get("id"), block_type)
                continue

            text = serialize_block(self.serializers.block, block)
            if text is not None:
                page.lines.append(self.indent(text, depth))

            if block_type == BlockType.SYNCED_BLOCK:
                synced_from = (block.get(block_type) or {}).get("synced_from") or {}
                source_id = synced_from.get("block_id") or block["id"]
                self._walk(page, self.client.fetch_blocks(source_id), discovered, depth)
                continue

            if block_type in PAGE_BOUNDARY_TYPES:
                discovered.append(block)
                continue

            if block.get("has_children"):
                next_depth = depth if block_type in TRANSPARENT_BLOCK_TYPES else depth + 1
                self._walk(page, self.client.fetch_blocks(block["id"]), discovered, next_depth)

    # --- Helpers ---------------------------------------------------------

    def _skipped(self, node_id: str) -> bool:
        if normalize_id(node_id) in self.skip_ids:
            self.logger.debug("Skipping %s (in skip list).", node_id)
            return True
        return False

    def _failure(self, node_id: str, parent_id: str | None, exc: Exception) -> CrawlFailure:
        reason = _reason(exc)
        self.logger.warning("Failed to crawl %s (parent: %s): %s", node_id, parent_id, reason)
        return CrawlFailure(id=node_id, parent_id=parent_id, reason=reason)
