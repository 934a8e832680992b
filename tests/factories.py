"""Notion object factories and an in-memory content client for tests."""

from __future__ import annotations

import itertools
from typing import Any

_ids = itertools.count(1)

TIMESTAMP = "2023-09-01T00:00:00.000Z"


def run(plain_text: str, href: str | None = None, **annotations: bool) -> dict:
    """Build a Notion rich text object."""
    return {
        "type": "text",
        "plain_text": plain_text,
        "href": href,
        "annotations": {
            "bold": False,
            "italic": False,
            "strikethrough": False,
            "underline": False,
            "code": False,
            **annotations,
        },
    }


def block(block_type: str, payload: dict | None = None, *, id: str | None = None, has_children: bool = False) -> dict:  # noqa: A002
    """Build a Notion block object."""
    return {
        "object": "block",
        "id": id or f"block-{next(_ids)}",
        "type": block_type,
        "has_children": has_children,
        "created_time": TIMESTAMP,
        "last_edited_time": TIMESTAMP,
        block_type: payload if payload is not None else {},
    }


def paragraph(text: str, **kwargs: Any) -> dict:
    return block("paragraph", {"rich_text": [run(text)]}, **kwargs)


def child_page(id: str, title: str) -> dict:  # noqa: A002
    return block("child_page", {"title": title}, id=id, has_children=True)


def child_database(id: str, title: str) -> dict:  # noqa: A002
    return block("child_database", {"title": title}, id=id)


def page(id: str, title: str = "", parent: dict | None = None, **properties: dict) -> dict:  # noqa: A002
    """Build a Notion page object with a title property."""
    props = {"Name": {"id": "title", "type": "title", "title": [run(title)] if title else []}}
    props.update(properties)
    return {
        "object": "page",
        "id": id,
        "created_time": TIMESTAMP,
        "last_edited_time": TIMESTAMP,
        "parent": parent or {"type": "workspace", "workspace": True},
        "url": f"https://www.notion.so/{id}",
        "properties": props,
    }


class FakeContentClient:
    """Content client serving pages, block children and databases from dicts.

    Ids listed in ``failing`` raise ``RuntimeError`` when their children are
    fetched. Every call is recorded in ``calls``.
    """

    def __init__(
        self,
        pages: dict[str, dict] | None = None,
        children: dict[str, list[dict]] | None = None,
        databases: dict[str, list[dict]] | None = None,
        failing: set[str] | None = None,
    ) -> None:
        self.pages = pages or {}
        self.children = children or {}
        self.databases = databases or {}
        self.failing = failing or set()
        self.calls: list[tuple[str, str]] = []

    def fetch_blocks(self, block_id: str) -> list[dict]:
        self.calls.append(("blocks", block_id))
        if block_id in self.failing:
            raise RuntimeError(f"boom while fetching {block_id}")
        return list(self.children.get(block_id, []))

    def fetch_page(self, page_id: str) -> dict:
        self.calls.append(("page", page_id))
        if page_id in self.failing:
            raise RuntimeError(f"boom while fetching {page_id}")
        return self.pages[page_id]

    def fetch_database_records(self, database_id: str) -> list[dict]:
        self.calls.append(("database", database_id))
        if database_id in self.failing:
            raise RuntimeError(f"boom while querying {database_id}")
        return list(self.databases.get(database_id, []))

    def fetched(self, node_id: str) -> bool:
        return any(called_id == node_id for _, called_id in self.calls)
