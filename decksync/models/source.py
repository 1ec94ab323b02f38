"""
Airtable rows and their field values.

Airtable returns loosely typed JSON: the same field can be a string, a list
of strings, a list of attachment objects, a boolean or a number depending on
the column type. Each raw value is classified once, at the client boundary,
into one of the variants below so the rest of the pipeline coerces by
variant instead of inspecting raw JSON.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class AttachmentRef:
    """
    An Airtable attachment descriptor.

    Attributes:
        url: Pre-signed download URL (no auth header needed)
        filename: Original filename, if provided
        type: MIME type, if provided (e.g. "text/plain")
    """

    url: str
    filename: str | None = None
    type: str | None = None


@dataclass(frozen=True, slots=True)
class TextValue:
    text: str


@dataclass(frozen=True, slots=True)
class ListValue:
    items: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class AttachmentsValue:
    refs: tuple[AttachmentRef, ...]


@dataclass(frozen=True, slots=True)
class ScalarValue:
    """Booleans, numbers and any other JSON scalar."""

    raw: Any


FieldValue = TextValue | ListValue | AttachmentsValue | ScalarValue


def _is_attachment(item: Any) -> bool:
    return isinstance(item, Mapping) and isinstance(item.get("url"), str)


def classify_field_value(raw: Any) -> FieldValue | None:
    """
    Classify a raw Airtable JSON value.

    Args:
        raw: Value as decoded from the API response

    Returns:
        The matching FieldValue variant, or None for null
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        return TextValue(raw)
    if isinstance(raw, list):
        if raw and all(_is_attachment(item) for item in raw):
            return AttachmentsValue(
                tuple(
                    AttachmentRef(
                        url=item["url"],
                        filename=item.get("filename"),
                        type=item.get("type"),
                    )
                    for item in raw
                )
            )
        return ListValue(tuple(str(item) for item in raw if item is not None))
    return ScalarValue(raw)


@dataclass(frozen=True)
class SourceRow:
    """One Airtable record: its id and classified fields keyed by display label."""

    id: str
    fields: dict[str, FieldValue] = field(default_factory=dict)

    @classmethod
    def from_api(cls, record: Mapping[str, Any]) -> "SourceRow":
        """Build a row from an item of the API's "records" array."""
        raw_fields = record.get("fields") or {}
        fields: dict[str, FieldValue] = {}
        for label, raw in raw_fields.items():
            value = classify_field_value(raw)
            if value is not None:
                fields[label] = value
        return cls(id=str(record.get("id", "")), fields=fields)

    def get(self, label: str) -> FieldValue | None:
        return self.fields.get(label)
