"""Singer Tap entrypoint for Notion markdown export.

TapNotionMarkdown declares the configuration schema and exposes the single
`pages` stream. Each record of that stream is one Notion page converted to
a markdown document (title heading, properties block and body).
"""

from __future__ import annotations

import sys

from singer_sdk import Tap
from singer_sdk import typing as th  # JSON schema typing helpers

from . import streams

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override


class TapNotionMarkdown(Tap):
    """Singer Tap that crawls Notion pages into markdown.

    Configuration:
    - auth_token (required): Notion integration token used for Bearer auth.
    - page_ids / database_ids: Roots of the crawl.
    - skip_ids: Pages and databases left out of the crawl entirely.
    - url_mask: Replaces every rendered link target.
    - property_strategy: ``minimal`` (default) or ``full`` property output.
    - notion_version, page_size, user_agent: Request tweaks.
    """

    name = "tap-notion-markdown"

    config_jsonschema = th.PropertiesList(
        th.Property(
            "auth_token",
            th.StringType(nullable=False),
            required=True,
            secret=True,
            title="Auth Token",
            description="The Notion integration token (starts with 'secret_').",
        ),
        th.Property(
            "page_ids",
            th.ArrayType(th.StringType),
            description="Ids of the root pages to crawl.",
        ),
        th.Property(
            "database_ids",
            th.ArrayType(th.StringType),
            description="Ids of the root databases whose records are crawled.",
        ),
        th.Property(
            "skip_ids",
            th.ArrayType(th.StringType),
            description="Page or database ids that are never fetched or emitted.",
        ),
        th.Property(
            "url_mask",
            th.StringType(nullable=True),
            description="If set, every rendered link target is replaced by this string.",
        ),
        th.Property(
            "property_strategy",
            th.StringType(nullable=True),
            allowed_values=["minimal", "full"],
            description=(
                "'minimal' renders only title, checkbox, date, email, files and "
                "creation properties; 'full' renders every property type."
            ),
        ),
        th.Property(
            "notion_version",
            th.StringType(nullable=True),
            title="Notion API Version",
            description="Override the Notion-Version header (default '2022-06-28').",
        ),
        th.Property(
            "page_size",
            th.IntegerType(nullable=True),
            description="Items per page for list and query endpoints (max 100).",
        ),
        th.Property(
            "user_agent",
            th.StringType(nullable=True),
            description="A custom User-Agent header to send with each request.",
        ),
    ).to_dict()

    @override
    def discover_streams(self) -> list[streams.MarkdownPagesStream]:
        """Return the list of available streams."""
        return [streams.MarkdownPagesStream(self)]


if __name__ == "__main__":
    TapNotionMarkdown.cli()
