"""Data model shared by the serializers, the crawler and the Singer stream.

Notion objects (blocks, pages, properties) are consumed as the plain
dictionaries returned by the API and are never mutated. The types defined
here are the derived output: a `Page` per crawled page and one crawl result
per visited page.
"""

from __future__ import annotations

import enum
import typing as t
from dataclasses import dataclass, field


class BlockType(str, enum.Enum):
    """Block types the block serializer strategy knows about."""

    AUDIO = "audio"
    BOOKMARK = "bookmark"
    BREADCRUMB = "breadcrumb"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    CALLOUT = "callout"
    CHILD_DATABASE = "child_database"
    CHILD_PAGE = "child_page"
    CODE = "code"
    COLUMN = "column"
    COLUMN_LIST = "column_list"
    DIVIDER = "divider"
    EMBED = "embed"
    EQUATION = "equation"
    FILE = "file"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    IMAGE = "image"
    LINK_PREVIEW = "link_preview"
    LINK_TO_PAGE = "link_to_page"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    PARAGRAPH = "paragraph"
    PDF = "pdf"
    QUOTE = "quote"
    SYNCED_BLOCK = "synced_block"
    TABLE = "table"
    TABLE_OF_CONTENTS = "table_of_contents"
    TABLE_ROW = "table_row"
    TEMPLATE = "template"
    TO_DO = "to_do"
    TOGGLE = "toggle"
    UNSUPPORTED = "unsupported"
    VIDEO = "video"


class PropertyType(str, enum.Enum):
    """Page property types the property serializer strategy knows about."""

    CHECKBOX = "checkbox"
    CREATED_BY = "created_by"
    CREATED_TIME = "created_time"
    DATE = "date"
    EMAIL = "email"
    FILES = "files"
    FORMULA = "formula"
    LAST_EDITED_BY = "last_edited_by"
    LAST_EDITED_TIME = "last_edited_time"
    MULTI_SELECT = "multi_select"
    NUMBER = "number"
    PEOPLE = "people"
    PHONE_NUMBER = "phone_number"
    RELATION = "relation"
    RICH_TEXT = "rich_text"
    ROLLUP = "rollup"
    SELECT = "select"
    STATUS = "status"
    TITLE = "title"
    UNIQUE_ID = "unique_id"
    URL = "url"
    VERIFICATION = "verification"


# Serializers return None to signal "produces no output".
BlockSerializer = t.Callable[[dict], t.Optional[str]]
PropertySerializer = t.Callable[[str, dict], t.Optional[str]]
BlockSerializers = t.Dict[BlockType, BlockSerializer]
PropertySerializers = t.Dict[PropertyType, PropertySerializer]


@dataclass
class PageMetadata:
    """Canonical page metadata plus caller-defined ``extra`` fields."""

    id: str
    title: str
    created_time: str | None = None
    last_edited_time: str | None = None
    parent_id: str | None = None
    extra: dict[str, t.Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, t.Any]:
        """Return a flat dictionary with the extra fields merged in.

        Extra fields never replace the canonical ones.
        """
        data: dict[str, t.Any] = dict(self.extra)
        data.update(
            id=self.id,
            title=self.title,
            created_time=self.created_time,
            last_edited_time=self.last_edited_time,
            parent_id=self.parent_id,
        )
        return data


@dataclass
class Page:
    """One crawled page: metadata, serialized properties and body lines."""

    metadata: PageMetadata
    properties: list[str] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MetadataSource:
    """Input handed to a caller-supplied metadata builder."""

    source: dict
    title: str
    properties: tuple[str, ...]
    parent: Page | None


MetadataBuilder = t.Callable[[MetadataSource], t.Mapping[str, t.Any]]


@dataclass(frozen=True)
class CrawlSuccess:
    id: str
    page: Page

    success: t.ClassVar[bool] = True


@dataclass(frozen=True)
class CrawlFailure:
    id: str
    parent_id: str | None
    reason: str

    success: t.ClassVar[bool] = False


CrawlingResult = t.Union[CrawlSuccess, CrawlFailure]


class MalformedPageError(ValueError):
    """A fetched page object does not have the expected shape."""
