"""Turn crawled pages into markdown documents."""

from __future__ import annotations

import re
import typing as t

from tap_notion_markdown import markdown as md

if t.TYPE_CHECKING:
    from collections.abc import Iterable

    from tap_notion_markdown.models import CrawlingResult, Page

_HEADING = re.compile(r"^#+\s")


def nest_heading(line: str) -> str:
    """Demote a markdown heading line by one level; other lines pass through."""
    return "#" + line if _HEADING.match(line) else line


def render_page(page: Page) -> str:
    """Render ``page`` as a single markdown string.

    The title becomes the only level-one heading, the serialized properties
    are placed between ``---`` fences, and body headings are demoted so they
    sit below the title.
    """
    title = md.h1(page.metadata.title)
    front_matter = "\n".join(["---", "\n".join(page.properties), "---"])
    body = [nest_heading(line) for line in page.lines]
    return "\n".join([title, front_matter, *body])


def collect_results(results: Iterable[CrawlingResult]) -> list[CrawlingResult]:
    """Drain a crawl into a list."""
    return list(results)
