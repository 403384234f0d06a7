"""Document tag cell: compact tag badges with an overflow popover.

A knowledge-base document carries a fixed set of typed tag slots. The cell
shows the first two non-empty tags inline, a "+N" badge for the rest, and a
detail panel that lists every tag (the inline ones included).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from html import escape
from typing import Any, Literal
import uuid

from pydantic import BaseModel, Field

from vault_workflow.config import TagCellConfig

FieldType = Literal["text", "number", "date", "boolean"]

TAG_SLOTS: tuple[str, ...] = (
    "tag1",
    "tag2",
    "tag3",
    "tag4",
    "tag5",
    "tag6",
    "tag7",
    "number1",
    "number2",
    "number3",
    "number4",
    "number5",
    "date1",
    "date2",
    "boolean1",
    "boolean2",
    "boolean3",
)

_SLOT_PREFIXES: tuple[tuple[str, FieldType], ...] = (
    ("tag", "text"),
    ("number", "number"),
    ("date", "date"),
    ("boolean", "boolean"),
)

# Tried after ISO-8601 and RFC 2822.
_DATE_PATTERNS = ("%B %d, %Y", "%b %d, %Y", "%m/%d/%Y", "%Y/%m/%d", "%d %B %Y", "%d %b %Y")

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class TagDefinition(BaseModel):
    """User-facing label and type for one tag slot of a knowledge base."""

    tag_slot: str
    display_name: str
    field_type: FieldType | None = None


@dataclass(slots=True)
class TagValue:
    slot: str
    display_name: str
    value: str
    field_type: str


class TagBadge(BaseModel):
    slot: str
    label: str
    tooltip: str


class OverflowBadge(BaseModel):
    label: str
    tooltip: str
    hidden_count: int


class TagDetail(BaseModel):
    slot: str
    display_name: str
    value: str


class TagsCellView(BaseModel):
    """Render-ready description of a tags cell."""

    placeholder: str | None = None
    visible: list[TagBadge] = Field(default_factory=list)
    overflow: OverflowBadge | None = None
    details: list[TagDetail] = Field(default_factory=list)
    stop_propagation: bool = True


def get_field_type(slot: str) -> FieldType:
    for prefix, field_type in _SLOT_PREFIXES:
        if slot.startswith(prefix):
            return field_type
    return "text"


def format_tag_value(value: Any, field_type: str) -> str:
    if value is None:
        return ""
    if field_type == "date":
        parsed = _parse_date(value)
        if parsed is None:
            return _stringify(value)
        return f"{_MONTHS[parsed.month - 1]} {parsed.day}, {parsed.year}"
    if field_type == "boolean":
        return "Yes" if value else "No"
    if field_type == "number" and _is_number(value):
        return _group_number(value)
    return _stringify(value)


def collect_tag_values(
    document: Mapping[str, Any],
    tag_definitions: Sequence[TagDefinition],
) -> list[TagValue]:
    """Return the document's non-empty tags in slot order."""
    definitions = {definition.tag_slot: definition for definition in reversed(tag_definitions)}
    result: list[TagValue] = []
    for slot in TAG_SLOTS:
        value = document.get(slot)
        if value is None:
            continue

        definition = definitions.get(slot)
        field_type = (definition.field_type if definition else None) or get_field_type(slot)
        formatted = format_tag_value(value, field_type)
        if not formatted:
            continue

        result.append(
            TagValue(
                slot=slot,
                display_name=(definition.display_name if definition else None) or slot,
                value=formatted,
                field_type=field_type,
            )
        )
    return result


def build_tags_cell(
    document: Mapping[str, Any],
    tag_definitions: Sequence[TagDefinition],
    config: TagCellConfig | None = None,
) -> TagsCellView:
    config = config or TagCellConfig()
    tags = collect_tag_values(document, tag_definitions)
    if not tags:
        return TagsCellView(placeholder=config.placeholder)

    visible_tags = tags[: config.max_visible_tags]
    overflow_tags = tags[config.max_visible_tags :]

    view = TagsCellView(
        visible=[
            TagBadge(
                slot=tag.slot,
                label=_truncate(tag.value, config.badge_max_chars),
                tooltip=f"{tag.display_name}: {tag.value}",
            )
            for tag in visible_tags
        ]
    )
    if overflow_tags:
        view.overflow = OverflowBadge(
            label=f"+{len(overflow_tags)}",
            tooltip=", ".join(tag.display_name for tag in overflow_tags),
            hidden_count=len(overflow_tags),
        )
        view.details = [
            TagDetail(
                slot=tag.slot,
                display_name=tag.display_name,
                value=_truncate(tag.value, config.detail_value_max_chars),
            )
            for tag in tags
        ]
    return view


def render_tags_cell_html(view: TagsCellView, cell_id: str | None = None) -> str:
    """Render the cell as an HTML fragment.

    The detail panel is a native popover, hidden until the "+N" button
    opens it. `cell_id` keeps popover ids unique across the cells of a table.
    """
    if view.placeholder is not None:
        return f'<span class="tags-cell-empty">{escape(view.placeholder)}</span>'

    parts = ['<div class="tags-cell" onclick="event.stopPropagation()">']
    for badge in view.visible:
        parts.append(
            f'<span class="badge" data-slot="{escape(badge.slot)}" '
            f'title="{escape(badge.tooltip)}">{escape(badge.label)}</span>'
        )
    if view.overflow is not None:
        popover_id = f"tags-cell-{escape(cell_id or uuid.uuid4().hex[:12])}-details"
        parts.append('<div class="tags-cell-overflow">')
        parts.append(
            f'<button type="button" class="badge badge-outline" popovertarget="{popover_id}" '
            f'title="{escape(view.overflow.tooltip)}">{escape(view.overflow.label)}</button>'
        )
        parts.append(f'<div class="tags-cell-popover" id="{popover_id}" popover role="dialog">')
        for detail in view.details:
            parts.append(
                f'<div class="tags-cell-row" data-slot="{escape(detail.slot)}">'
                f'<span class="tags-cell-name">{escape(detail.display_name)}</span>'
                f'<span class="tags-cell-value">{escape(detail.value)}</span>'
                "</div>"
            )
        parts.append("</div></div>")
    parts.append("</div>")
    return "".join(parts)


def _parse_date(value: Any) -> date | None:
    if isinstance(value, datetime | date):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        pass
    for pattern in _DATE_PATTERNS:
        try:
            return datetime.strptime(text, pattern)
        except ValueError:
            continue
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _group_number(value: int | float) -> str:
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return _stringify(value)
        if not value.is_integer():
            return f"{value:,.3f}".rstrip("0").rstrip(".")
        value = int(value)
    return f"{value:,}"


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."
