"""Serializer strategies for Notion blocks and page properties."""

from __future__ import annotations

import typing as t
from dataclasses import dataclass

from tap_notion_markdown.models import (
    BlockSerializer,
    BlockSerializers,
    BlockType,
    PropertySerializer,
    PropertySerializers,
    PropertyType,
)
from tap_notion_markdown.serializers.blocks import block_serializers, serialize_block
from tap_notion_markdown.serializers.properties import (
    MINIMAL_PROPERTY_TYPES,
    minimal_property_serializers,
    property_serializers,
    serialize_properties,
    serialize_property,
)


@dataclass
class Serializers:
    block: BlockSerializers
    property: PropertySerializers


def merge_serializers(
    block: t.Mapping[BlockType | str, BlockSerializer] | None = None,
    property: t.Mapping[PropertyType | str, PropertySerializer] | None = None,  # noqa: A002
    *,
    url_mask: str | None = None,
    minimal: bool = True,
) -> Serializers:
    """Return the default strategies with caller overrides applied on top.

    Override keys may be enum members or their string values, so
    ``{"heading_1": fn}`` and ``{BlockType.HEADING_1: fn}`` are equivalent.
    An unknown key raises ``ValueError``.

    Args:
        block: Block serializer overrides.
        property: Property serializer overrides.
        url_mask: Forwarded to the default strategies.
        minimal: Use the minimal property strategy as the base.

    Returns:
        The merged strategies.
    """
    blocks = block_serializers(url_mask)
    blocks.update({BlockType(key): fn for key, fn in (block or {}).items()})

    base = minimal_property_serializers if minimal else property_serializers
    props = base(url_mask)
    props.update({PropertyType(key): fn for key, fn in (property or {}).items()})

    return Serializers(block=blocks, property=props)


__all__ = [
    "MINIMAL_PROPERTY_TYPES",
    "Serializers",
    "block_serializers",
    "merge_serializers",
    "minimal_property_serializers",
    "property_serializers",
    "serialize_block",
    "serialize_properties",
    "serialize_property",
]
