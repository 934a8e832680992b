"""Rich text, link and value helpers shared by block and property serializers."""

from __future__ import annotations

import re
import typing as t
from urllib.parse import unquote, urlsplit

from tap_notion_markdown import markdown as md

EMPTY_STR = "<empty>"
DELIMITER = ", "

_LEADING_SPACE = re.compile(r"^\s*")
_TRAILING_SPACE = re.compile(r"\s*$")
_FILE_NAME = re.compile(r"^[^/\\&?#]+\.[A-Za-z0-9]{1,5}$")


class Link(t.NamedTuple):
    title: str
    href: str


def annotate(text: str, annotations: t.Mapping[str, t.Any] | None) -> str:
    """Wrap ``text`` in the markers for each enabled annotation.

    The order is fixed, innermost first: code, bold, italic, strikethrough,
    underline.
    """
    annotations = annotations or {}
    if annotations.get("code"):
        text = md.inline_code(text)
    if annotations.get("bold"):
        text = md.bold(text)
    if annotations.get("italic"):
        text = md.italic(text)
    if annotations.get("strikethrough"):
        text = md.strikethrough(text)
    if annotations.get("underline"):
        text = md.underline(text)
    return text


def rich_text(runs: t.Iterable[dict] | None, url_mask: str | None = None) -> str:
    """Render a list of Notion rich text objects as inline markdown.

    Leading and trailing whitespace of each run is kept outside of the
    markers so that ``" bold "`` renders as ``" **bold** "``. Whitespace-only
    runs are returned untouched.

    Args:
        runs: Notion rich text objects (``plain_text``, ``annotations``,
            ``href``).
        url_mask: When set, replaces every link target.

    Returns:
        The concatenated markdown text.
    """
    parts: list[str] = []
    for run in runs or []:
        plain = run.get("plain_text") or ""
        if not plain.strip():
            parts.append(plain)
            continue

        leading = _LEADING_SPACE.match(plain).group(0)
        trailing = _TRAILING_SPACE.search(plain).group(0)
        text = annotate(plain.strip(), run.get("annotations"))

        href = run.get("href")
        if href:
            text = md.anchor(text, url_mask or href)

        parts.append(leading + text + trailing)
    return "".join(parts)


def plain_text(runs: t.Iterable[dict] | None) -> str:
    return "".join(run.get("plain_text") or "" for run in runs or [])


def file_name(url: str) -> str | None:
    """Return the last path segment of ``url`` if it looks like a file name."""
    if not url:
        return None
    path = urlsplit(url).path
    segment = unquote(path.rstrip("/").rsplit("/", 1)[-1])
    if _FILE_NAME.match(segment):
        return segment
    return None


def link_href(link_object: t.Mapping[str, t.Any]) -> str:
    kind = link_object.get("type")
    if kind in ("external", "file"):
        return (link_object.get(kind) or {}).get("url") or ""
    return link_object.get("url") or ""


def link(link_object: t.Mapping[str, t.Any], url_mask: str | None = None) -> Link:
    """Resolve a display title and href for a file-like Notion object.

    Handles ``external`` and hosted ``file`` objects as well as the plain
    ``url`` payloads of bookmark, embed and link preview blocks.
    """
    href = link_href(link_object)
    caption = rich_text(link_object.get("caption"), url_mask)
    if caption.strip():
        title = caption
    else:
        title = file_name(href) or "link"
    return Link(title=title, href=url_mask or href)


def from_date(date: t.Mapping[str, t.Any] | None) -> str:
    if not date or not date.get("start"):
        return EMPTY_STR
    start = date["start"]
    end = date.get("end")
    if end:
        return f"(start){start}, (end): {end}"
    return start


def from_user(user: t.Mapping[str, t.Any] | None) -> str:
    if not user:
        return EMPTY_STR
    return user.get("name") or user.get("id") or EMPTY_STR
