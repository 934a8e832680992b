"""tap_notion_markdown: crawl Notion pages into markdown documents.

Contents:
- crawler.py: Traversal engine walking pages, blocks and databases.
- serializers/: Block and property serializer strategies.
- models.py: Page, metadata and crawl result types.
- render.py: Page to markdown document rendering.
- client.py / streams.py: Notion REST access and the Singer `pages` stream.
- tap.py: Tap entrypoint (configuration and stream discovery).

The crawler does not depend on Singer; any object with ``fetch_blocks``,
``fetch_page`` and ``fetch_database_records`` can drive it.
"""

from tap_notion_markdown.crawler import ContentClient, Crawler
from tap_notion_markdown.models import CrawlFailure, CrawlingResult, CrawlSuccess, Page, PageMetadata
from tap_notion_markdown.render import collect_results, render_page

__all__ = [
    "ContentClient",
    "CrawlFailure",
    "CrawlSuccess",
    "Crawler",
    "CrawlingResult",
    "Page",
    "PageMetadata",
    "collect_results",
    "render_page",
]
