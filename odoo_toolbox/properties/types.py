"""
Shapes of Odoo "properties" fields.

Read format: a list of self-describing entries, one per property, tagged by
``type``. Write format: a flat ``{name: value}`` mapping that replaces the
whole set on write.
"""

from __future__ import annotations

from typing import Any, Literal, NotRequired, TypedDict, Union, get_args

PropertyType = Literal[
    "char",
    "text",
    "integer",
    "float",
    "boolean",
    "date",
    "datetime",
    "selection",
    "many2one",
    "many2many",
    "tags",
    "separator",
]

PROPERTY_TYPES: frozenset[str] = frozenset(get_args(PropertyType))


# --- Definitions (stored on the parent record) ---

class PropertyDefinition(TypedDict):
    name: str
    string: str
    type: PropertyType
    selection: NotRequired[list[list[str]]]
    comodel: NotRequired[str]
    tags: NotRequired[list[list[Any]]]
    default: NotRequired[Any]
    view_in_cards: NotRequired[bool]


# --- Read format entries, one variant per type ---

class _PropertyValueBase(TypedDict):
    name: str
    string: str


class CharPropertyValue(_PropertyValueBase):
    type: Literal["char", "text"]
    value: str | Literal[False]


class IntegerPropertyValue(_PropertyValueBase):
    type: Literal["integer"]
    value: int | Literal[False]


class FloatPropertyValue(_PropertyValueBase):
    type: Literal["float"]
    value: float | Literal[False]


class BooleanPropertyValue(_PropertyValueBase):
    type: Literal["boolean"]
    value: bool


class DatePropertyValue(_PropertyValueBase):
    # ISO date / datetime strings
    type: Literal["date", "datetime"]
    value: str | Literal[False]


class SelectionPropertyValue(_PropertyValueBase):
    type: Literal["selection"]
    selection: list[list[str]]
    value: str | Literal[False]


class Many2onePropertyValue(_PropertyValueBase):
    type: Literal["many2one"]
    comodel: str
    value: int | list[Any] | Literal[False]


class Many2manyPropertyValue(_PropertyValueBase):
    type: Literal["many2many"]
    comodel: str
    value: list[Any]


class TagsPropertyValue(_PropertyValueBase):
    type: Literal["tags"]
    tags: NotRequired[list[list[Any]]]
    value: list[str]


class SeparatorPropertyValue(_PropertyValueBase):
    type: Literal["separator"]
    value: NotRequired[Any]


PropertyValue = Union[
    CharPropertyValue,
    IntegerPropertyValue,
    FloatPropertyValue,
    BooleanPropertyValue,
    DatePropertyValue,
    SelectionPropertyValue,
    Many2onePropertyValue,
    Many2manyPropertyValue,
    TagsPropertyValue,
    SeparatorPropertyValue,
]

PropertiesReadFormat = list[PropertyValue]
PropertiesWriteFormat = dict[str, Any]
PropertiesDefinition = list[PropertyDefinition]
