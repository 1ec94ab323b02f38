import pytest

from decksync.models.failure import AttachmentFetchError
from decksync.models.source import (
    AttachmentRef,
    AttachmentsValue,
    ListValue,
    ScalarValue,
    TextValue,
)
from decksync.services.attachments import resolve_decklist_text, select_attachment


class FakeFetcher:
    """Records requested URLs and returns canned bodies."""

    def __init__(self, bodies: dict[str, str]) -> None:
        self.bodies = bodies
        self.requested: list[str] = []

    async def __call__(self, url: str) -> str:
        self.requested.append(url)
        if url not in self.bodies:
            raise AttachmentFetchError(url, 404)
        return self.bodies[url]


class TestSelectAttachment:
    def test_prefers_plain_text_type(self) -> None:
        """A text/plain attachment beats an earlier non-text one."""
        image = AttachmentRef(url="https://dl/a.png", filename="a.png", type="image/png")
        text = AttachmentRef(url="https://dl/b", filename="list", type="text/plain; charset=utf-8")

        assert select_attachment((image, text)) == text

    def test_prefers_txt_filename(self) -> None:
        """A .txt filename counts as plain text."""
        pdf = AttachmentRef(url="https://dl/a.pdf", filename="a.pdf")
        text = AttachmentRef(url="https://dl/b.TXT", filename="DECK.TXT")

        assert select_attachment((pdf, text)) == text

    def test_falls_back_to_first(self) -> None:
        """Without a text attachment the first one is used."""
        first = AttachmentRef(url="https://dl/a.dek", filename="a.dek")
        second = AttachmentRef(url="https://dl/b.png", filename="b.png")

        assert select_attachment((first, second)) == first

    def test_empty(self) -> None:
        """No attachments selects nothing."""
        assert select_attachment(()) is None


class TestResolveDecklistText:
    @pytest.mark.asyncio
    async def test_inline_text_is_returned_as_is(self) -> None:
        """Inline text needs no fetch."""
        fetch = FakeFetcher({})

        assert await resolve_decklist_text(TextValue("4 Shock\n"), fetch) == "4 Shock\n"
        assert fetch.requested == []

    @pytest.mark.asyncio
    async def test_fetches_selected_attachment(self) -> None:
        """The preferred attachment's body is downloaded."""
        fetch = FakeFetcher({"https://dl/list.txt": "4 Shock\n\n2 Abrade\n1 Fury"})
        value = AttachmentsValue(
            (
                AttachmentRef(url="https://dl/cover.png", filename="cover.png"),
                AttachmentRef(url="https://dl/list.txt", filename="list.txt"),
            )
        )

        assert await resolve_decklist_text(value, fetch) == "4 Shock\n\n2 Abrade\n1 Fury"
        assert fetch.requested == ["https://dl/list.txt"]

    @pytest.mark.asyncio
    async def test_missing_value_is_empty(self) -> None:
        """Absent or unusable values resolve to an empty string."""
        fetch = FakeFetcher({})

        assert await resolve_decklist_text(None, fetch) == ""
        assert await resolve_decklist_text(ScalarValue(42), fetch) == ""
        assert await resolve_decklist_text(AttachmentsValue(()), fetch) == ""

    @pytest.mark.asyncio
    async def test_string_list_is_joined(self) -> None:
        """A list of strings is joined line by line."""
        fetch = FakeFetcher({})

        assert await resolve_decklist_text(ListValue(("4 Shock", "2 Abrade")), fetch) == (
            "4 Shock\n2 Abrade"
        )

    @pytest.mark.asyncio
    async def test_fetch_error_propagates(self) -> None:
        """Attachment download failures reach the caller."""
        value = AttachmentsValue((AttachmentRef(url="https://dl/gone.txt"),))

        with pytest.raises(AttachmentFetchError, match="HTTP 404"):
            await resolve_decklist_text(value, FakeFetcher({}))
