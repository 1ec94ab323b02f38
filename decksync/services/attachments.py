"""
Deck list resolution.

The "Deck List" column is either long text or an attachment field. For
attachments, a plain-text file is preferred; otherwise the first file is
downloaded as-is.
"""

from collections.abc import Awaitable, Callable

from decksync.models.source import (
    AttachmentRef,
    AttachmentsValue,
    FieldValue,
    ListValue,
    TextValue,
)

FetchText = Callable[[str], Awaitable[str]]


def _is_plain_text(ref: AttachmentRef) -> bool:
    if ref.type and ref.type.lower().startswith("text/plain"):
        return True
    return bool(ref.filename) and ref.filename.lower().endswith(".txt")


def select_attachment(refs: tuple[AttachmentRef, ...]) -> AttachmentRef | None:
    """Pick the first plain-text attachment, else the first attachment."""
    if not refs:
        return None
    return next((ref for ref in refs if _is_plain_text(ref)), refs[0])


async def resolve_decklist_text(value: FieldValue | None, fetch_text: FetchText) -> str:
    """
    Resolve the deck list to a string.

    Args:
        value: The row's "Deck List" field
        fetch_text: Downloads a URL's body, e.g. AirtableClient.fetch_attachment_text

    Returns:
        Inline text as-is, attachment content, or "" when nothing usable exists

    Raises:
        AttachmentFetchError: Propagated from fetch_text when the download fails
    """
    if isinstance(value, TextValue):
        return value.text
    if isinstance(value, ListValue):
        return "\n".join(value.items)
    if isinstance(value, AttachmentsValue):
        ref = select_attachment(value.refs)
        if ref is None:
            return ""
        return await fetch_text(ref.url)
    return ""
