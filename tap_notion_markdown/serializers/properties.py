"""Property serializer strategy.

Each serializer renders one page property as ``"[<name>] <value>"`` or
returns ``None`` to leave the property out. Two strategies are provided:
the full one from `property_serializers`, and the minimal one from
`minimal_property_serializers`, which keeps only the properties listed in
`MINIMAL_PROPERTY_TYPES`.
"""

from __future__ import annotations

import typing as t

from tap_notion_markdown import markdown as md
from tap_notion_markdown.models import PropertySerializer, PropertySerializers, PropertyType
from tap_notion_markdown.serializers import utils
from tap_notion_markdown.serializers.utils import DELIMITER, EMPTY_STR

MINIMAL_PROPERTY_TYPES = frozenset(
    {
        PropertyType.CHECKBOX,
        PropertyType.CREATED_BY,
        PropertyType.CREATED_TIME,
        PropertyType.DATE,
        PropertyType.EMAIL,
        PropertyType.FILES,
        PropertyType.TITLE,
    }
)


def _fragment(name: str, value: t.Any) -> str:
    return f"[{name}] {value}"


def _scalar(value: t.Any) -> str:
    if value is None:
        return EMPTY_STR
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def property_serializers(url_mask: str | None = None) -> PropertySerializers:
    """Build the full property strategy.

    Every type is enabled except ``verification``, which always skips.

    Args:
        url_mask: When set, replaces the href of file links and rich text
            links.

    Returns:
        A dictionary keyed by every `PropertyType` member.
    """

    def checkbox(name: str, prop: dict) -> str:
        return _fragment(name, _scalar(bool(prop.get("checkbox"))))

    def created_by(name: str, prop: dict) -> str:
        return _fragment(name, utils.from_user(prop.get("created_by")))

    def created_time(name: str, prop: dict) -> str:
        return _fragment(name, _scalar(prop.get("created_time")))

    def date(name: str, prop: dict) -> str:
        return _fragment(name, utils.from_date(prop.get("date")))

    def email(name: str, prop: dict) -> str:
        return _fragment(name, _scalar(prop.get("email")))

    def files(name: str, prop: dict) -> str:
        items = []
        for item in prop.get("files") or []:
            href = utils.link_href(item)
            items.append(md.anchor(item.get("name") or "", url_mask or href))
        return _fragment(name, DELIMITER.join(items))

    def formula(name: str, prop: dict) -> str | None:
        value = prop.get("formula") or {}
        kind = value.get("type")
        if kind == "date":
            return _fragment(name, utils.from_date(value.get("date")))
        if kind in ("string", "boolean", "number"):
            return _fragment(name, _scalar(value.get(kind)))
        return None

    def last_edited_by(name: str, prop: dict) -> str:
        return _fragment(name, utils.from_user(prop.get("last_edited_by")))

    def last_edited_time(name: str, prop: dict) -> str:
        return _fragment(name, _scalar(prop.get("last_edited_time")))

    def multi_select(name: str, prop: dict) -> str:
        names = [option.get("name") or "" for option in prop.get("multi_select") or []]
        return _fragment(name, DELIMITER.join(names))

    def number(name: str, prop: dict) -> str:
        return _fragment(name, _scalar(prop.get("number")))

    def people(name: str, prop: dict) -> str:
        users = [utils.from_user(person) for person in prop.get("people") or []]
        return _fragment(name, DELIMITER.join(users))

    def phone_number(name: str, prop: dict) -> str:
        return _fragment(name, _scalar(prop.get("phone_number")))

    def relation(name: str, prop: dict) -> str:
        ids = [item.get("id") or "" for item in prop.get("relation") or []]
        return _fragment(name, DELIMITER.join(ids))

    def rich_text(name: str, prop: dict) -> str:
        return _fragment(name, utils.rich_text(prop.get("rich_text"), url_mask))

    def select(name: str, prop: dict) -> str:
        option = prop.get("select") or {}
        return _fragment(name, _scalar(option.get("name")))

    def status(name: str, prop: dict) -> str:
        option = prop.get("status") or {}
        return _fragment(name, _scalar(option.get("name")))

    def title(name: str, prop: dict) -> str:
        return _fragment(name, utils.rich_text(prop.get("title"), url_mask))

    def unique_id(name: str, prop: dict) -> str:
        value = prop.get("unique_id") or {}
        prefix = value.get("prefix") or ""
        num = value.get("number")
        ident = f"{prefix}{'' if num is None else num}"
        return _fragment(name, ident or EMPTY_STR)

    def url(name: str, prop: dict) -> str:
        return _fragment(name, _scalar(prop.get("url")))

    def verification(name: str, prop: dict) -> None:
        return None

    strategy: PropertySerializers = {
        PropertyType.CHECKBOX: checkbox,
        PropertyType.CREATED_BY: created_by,
        PropertyType.CREATED_TIME: created_time,
        PropertyType.DATE: date,
        PropertyType.EMAIL: email,
        PropertyType.FILES: files,
        PropertyType.FORMULA: formula,
        PropertyType.LAST_EDITED_BY: last_edited_by,
        PropertyType.LAST_EDITED_TIME: last_edited_time,
        PropertyType.MULTI_SELECT: multi_select,
        PropertyType.NUMBER: number,
        PropertyType.PEOPLE: people,
        PropertyType.PHONE_NUMBER: phone_number,
        PropertyType.RELATION: relation,
        PropertyType.RICH_TEXT: rich_text,
        PropertyType.SELECT: select,
        PropertyType.STATUS: status,
        PropertyType.TITLE: title,
        PropertyType.UNIQUE_ID: unique_id,
        PropertyType.URL: url,
        PropertyType.VERIFICATION: verification,
    }
    strategy[PropertyType.ROLLUP] = _rollup(dict(strategy))
    return strategy


def _rollup(item_strategy: PropertySerializers) -> PropertySerializer:
    """Return the rollup serializer built on top of ``item_strategy``.

    Array rollups render every aggregated item with its own type's
    serializer and join the values under the rollup's single name.
    """

    def rollup(name: str, prop: dict) -> str | None:
        value = prop.get("rollup") or {}
        kind = value.get("type")
        if kind == "number":
            return item_strategy[PropertyType.NUMBER](name, value)
        if kind == "date":
            return item_strategy[PropertyType.DATE](name, value)
        if kind != "array":
            return None

        prefix = f"[{name}] "
        items = []
        for item in value.get("array") or []:
            text = serialize_property(item_strategy, name, item)
            if text is None:
                continue
            items.append(text[len(prefix):] if text.startswith(prefix) else text)
        return _fragment(name, DELIMITER.join(items))

    return rollup


def minimal_property_serializers(url_mask: str | None = None) -> PropertySerializers:
    """Build the minimal strategy: only `MINIMAL_PROPERTY_TYPES` render."""
    full = property_serializers(url_mask)
    return {
        kind: serializer if kind in MINIMAL_PROPERTY_TYPES else (lambda name, prop: None)
        for kind, serializer in full.items()
    }


def serialize_property(
    strategy: t.Mapping[PropertyType, PropertySerializer],
    name: str,
    prop: dict,
) -> str | None:
    """Serialize one property; unknown or unmapped types produce nothing."""
    try:
        kind = PropertyType(prop.get("type"))
    except ValueError:
        return None
    serializer = strategy.get(kind)
    if serializer is None:
        return None
    return serializer(name, prop)


def serialize_properties(
    strategy: t.Mapping[PropertyType, PropertySerializer],
    properties: t.Mapping[str, dict] | None,
) -> list[str]:
    """Serialize a page's ``properties`` mapping, dropping skipped entries."""
    fragments = []
    for name, prop in (properties or {}).items():
        text = serialize_property(strategy, name, prop)
        if text is not None:
            fragments.append(text)
    return fragments
