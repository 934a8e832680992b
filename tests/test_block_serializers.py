"""Tests for the block serializer strategy."""

import pytest

from factories import block, run
from tap_notion_markdown.models import BlockType
from tap_notion_markdown.serializers import block_serializers, merge_serializers, serialize_block


@pytest.fixture
def strategy():
    return block_serializers()


def serialize(strategy, block_type, payload):
    return serialize_block(strategy, block(block_type, payload))


def test_strategy_covers_every_block_type(strategy):
    """Every known block type has a serializer."""
    assert set(strategy) == set(BlockType)


@pytest.mark.parametrize(
    ("block_type", "expected"),
    [
        ("heading_1", "# Title"),
        ("heading_2", "## Title"),
        ("heading_3", "### Title"),
        ("paragraph", "Title"),
        ("quote", "> Title"),
        ("callout", "> Title"),
        ("bulleted_list_item", "- Title"),
        ("numbered_list_item", "1. Title"),
        ("toggle", "Title"),
        ("template", "Title"),
    ],
)
def test_rich_text_blocks(strategy, block_type, expected):
    assert serialize(strategy, block_type, {"rich_text": [run("Title")]}) == expected


@pytest.mark.parametrize(
    "block_type",
    ["breadcrumb", "column", "column_list", "table", "table_of_contents", "synced_block", "unsupported"],
)
def test_structural_blocks_produce_nothing(strategy, block_type):
    assert serialize(strategy, block_type, {}) is None


def test_bulleted_list_item_empty(strategy):
    """An empty list item still renders its marker."""
    assert serialize(strategy, "bulleted_list_item", {"rich_text": []}) == "- "


def test_bulleted_list_item_keeps_annotations(strategy):
    payload = {"rich_text": [run("Hello, World!", href="https://example.com", bold=True)]}
    assert serialize(strategy, "bulleted_list_item", payload) == "- [**Hello, World!**](https://example.com)"


@pytest.mark.parametrize(("checked", "expected"), [(True, "- [x] Buy milk"), (False, "- [ ] Buy milk")])
def test_to_do(strategy, checked, expected):
    assert serialize(strategy, "to_do", {"rich_text": [run("Buy milk")], "checked": checked}) == expected


def test_code(strategy):
    payload = {"rich_text": [run("print('hi')")], "language": "python"}
    assert serialize(strategy, "code", payload) == "```python\nprint('hi')\n```"


def test_divider(strategy):
    assert serialize(strategy, "divider", {}) == "---"


def test_equation(strategy):
    assert serialize(strategy, "equation", {"expression": "e = mc^2"}) == "$$\ne = mc^2\n$$"


def test_table_row_renders_each_cell(strategy):
    """Each cell is a rich text list rendered on its own."""
    cells = [[run("a"), run("b", bold=True)], [run("c")], []]
    assert serialize(strategy, "table_row", {"cells": cells}) == "| a**b** | c |  |"


def test_image(strategy):
    payload = {"caption": [], "type": "file", "file": {"url": "https://example.com/cat.png"}}
    assert serialize(strategy, "image", payload) == "![cat.png](https://example.com/cat.png)"


@pytest.mark.parametrize("block_type", ["audio", "file", "pdf", "video"])
def test_file_like_blocks(strategy, block_type):
    payload = {"caption": [run("Media")], "type": "external", "external": {"url": "https://example.com/m"}}
    assert serialize(strategy, block_type, payload) == "[Media](https://example.com/m)"


def test_audio_without_caption(strategy):
    payload = {"caption": [], "type": "file", "file": {"url": "https://www.audio.so/audio.mp3"}}
    assert serialize(strategy, "audio", payload) == "[audio.mp3](https://www.audio.so/audio.mp3)"


def test_bookmark(strategy):
    payload = {"caption": [run("Google", bold=True)], "url": "https://www.google.com"}
    assert serialize(strategy, "bookmark", payload) == "[**Google**](https://www.google.com)"


def test_embed_without_caption(strategy):
    payload = {"caption": [], "url": "https://www.google.com"}
    assert serialize(strategy, "embed", payload) == "[link](https://www.google.com)"


def test_link_preview(strategy):
    assert serialize(strategy, "link_preview", {"url": "https://github.com/x"}) == "[link_preview](https://github.com/x)"


def test_link_to_page(strategy):
    assert serialize(strategy, "link_to_page", {"type": "page_id", "page_id": "abc"}) == "[link_to_page](abc)"
    assert serialize(strategy, "link_to_page", {"type": "comment_id", "comment_id": "c"}) == "[link_to_page]()"


@pytest.mark.parametrize("block_type", ["child_page", "child_database"])
def test_child_boundaries_render_title(strategy, block_type):
    assert serialize(strategy, block_type, {"title": "Projects"}) == "[Projects]"


def test_url_mask_applies_to_links():
    strategy = block_serializers(url_mask="#")
    payload = {"caption": [run("Doc", href="https://example.com")], "type": "external", "external": {"url": "https://x"}}
    assert serialize(strategy, "file", payload) == "[[Doc](#)](#)"
    assert serialize(strategy, "link_preview", {"url": "https://github.com/x"}) == "[link_preview](#)"


def test_unknown_block_type_produces_nothing(strategy):
    assert serialize_block(strategy, {"id": "x", "type": "ai_block", "ai_block": {}}) is None
    assert serialize_block(strategy, {"id": "x"}) is None


def test_merge_serializers_overrides_by_string_key():
    """Overrides may be keyed by the type's string value."""
    serializers = merge_serializers(block={"heading_1": lambda b: "custom"})
    assert serializers.block[BlockType.HEADING_1](block("heading_1", {"rich_text": []})) == "custom"
    assert serializers.block[BlockType.HEADING_2](block("heading_2", {"rich_text": [run("x")]})) == "## x"


def test_merge_serializers_rejects_unknown_key():
    with pytest.raises(ValueError):
        merge_serializers(block={"not_a_block": lambda b: ""})
