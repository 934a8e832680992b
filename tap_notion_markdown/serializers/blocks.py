"""Block serializer strategy.

`block_serializers` returns one serializer per `BlockType`. A serializer
takes the raw Notion block dictionary and returns a markdown fragment, or
``None`` when the block contributes no line of its own (structural blocks
such as columns still have their children walked by the crawler).
"""

from __future__ import annotations

import typing as t

from tap_notion_markdown import markdown as md
from tap_notion_markdown.models import BlockSerializers, BlockType
from tap_notion_markdown.serializers import utils


def _payload(block: dict) -> dict:
    return block.get(block["type"]) or {}


def _skip(block: dict) -> None:
    return None


def block_serializers(url_mask: str | None = None) -> BlockSerializers:
    """Build the default block strategy.

    Args:
        url_mask: When set, every rendered href is replaced by this string.

    Returns:
        A dictionary keyed by every `BlockType` member.
    """

    def text(block: dict) -> str:
        return utils.rich_text(_payload(block).get("rich_text"), url_mask)

    def heading_1(block: dict) -> str:
        return md.h1(text(block))

    def heading_2(block: dict) -> str:
        return md.h2(text(block))

    def heading_3(block: dict) -> str:
        return md.h3(text(block))

    def quote(block: dict) -> str:
        return md.quote(text(block))

    def bulleted_list_item(block: dict) -> str:
        return md.bullet(text(block))

    def numbered_list_item(block: dict) -> str:
        return md.bullet(text(block), 1)

    def to_do(block: dict) -> str:
        return md.todo(text(block), bool(_payload(block).get("checked")))

    def code(block: dict) -> str:
        return md.code_block(text(block), _payload(block).get("language") or "")

    def divider(block: dict) -> str:
        return md.hr()

    def equation(block: dict) -> str:
        return md.equation_block(_payload(block).get("expression") or "")

    def table_row(block: dict) -> str:
        cells = [utils.rich_text(cell, url_mask) for cell in _payload(block).get("cells") or []]
        return f"| {' | '.join(cells)} |"

    def anchor(block: dict) -> str:
        title, href = utils.link(_payload(block), url_mask)
        return md.anchor(title, href)

    def image(block: dict) -> str:
        title, href = utils.link(_payload(block), url_mask)
        return md.image(title, href)

    def link_preview(block: dict) -> str:
        href = _payload(block).get("url") or ""
        return md.anchor(block["type"], url_mask or href)

    def link_to_page(block: dict) -> str:
        target = _payload(block)
        kind = target.get("type")
        href = (target.get(kind) or "") if kind in ("page_id", "database_id") else ""
        return md.anchor(block["type"], href)

    def child_title(block: dict) -> str:
        return f"[{_payload(block).get('title') or ''}]"

    strategy: BlockSerializers = {
        BlockType.AUDIO: anchor,
        BlockType.BOOKMARK: anchor,
        BlockType.BREADCRUMB: _skip,
        BlockType.BULLETED_LIST_ITEM: bulleted_list_item,
        BlockType.CALLOUT: quote,
        BlockType.CHILD_DATABASE: child_title,
        BlockType.CHILD_PAGE: child_title,
        BlockType.CODE: code,
        BlockType.COLUMN: _skip,
        BlockType.COLUMN_LIST: _skip,
        BlockType.DIVIDER: divider,
        BlockType.EMBED: anchor,
        BlockType.EQUATION: equation,
        BlockType.FILE: anchor,
        BlockType.HEADING_1: heading_1,
        BlockType.HEADING_2: heading_2,
        BlockType.HEADING_3: heading_3,
        BlockType.IMAGE: image,
        BlockType.LINK_PREVIEW: link_preview,
        BlockType.LINK_TO_PAGE: link_to_page,
        BlockType.NUMBERED_LIST_ITEM: numbered_list_item,
        BlockType.PARAGRAPH: text,
        BlockType.PDF: anchor,
        BlockType.QUOTE: quote,
        BlockType.SYNCED_BLOCK: _skip,
        BlockType.TABLE: _skip,
        BlockType.TABLE_OF_CONTENTS: _skip,
        BlockType.TABLE_ROW: table_row,
        BlockType.TEMPLATE: text,
        BlockType.TO_DO: to_do,
        BlockType.TOGGLE: text,
        BlockType.UNSUPPORTED: _skip,
        BlockType.VIDEO: anchor,
    }
    return strategy


def serialize_block(strategy: t.Mapping[BlockType, t.Callable], block: dict) -> str | None:
    """Serialize ``block`` with ``strategy``; unknown types produce nothing."""
    try:
        block_type = BlockType(block.get("type"))
    except ValueError:
        return None
    serializer = strategy.get(block_type)
    if serializer is None:
        return None
    return serializer(block)
