"""Tests for the Airtable client (mocked HTTP)."""

import httpx
import pytest
import respx

from decksync.clients.airtable import AirtableClient
from decksync.config import SyncConfig
from decksync.models.failure import AttachmentFetchError, SourceFetchError
from decksync.models.source import TextValue

TABLE_URL = "https://api.airtable.com/v0/appTEST/decks"


class TestTableUrl:
    def test_quotes_table_name(self) -> None:
        """Table names with spaces are URL-encoded."""
        config = SyncConfig(token="pat", base_id="appX", table_name="My Decks")

        assert AirtableClient(config).table_url == "https://api.airtable.com/v0/appX/My%20Decks"


class TestFetchAllRows:
    @pytest.mark.asyncio
    @respx.mock
    async def test_follows_offset_cursor(self, sync_config: SyncConfig) -> None:
        """Pages are fetched until no offset is returned."""
        route = respx.get(TABLE_URL).mock(
            side_effect=[
                httpx.Response(
                    200,
                    json={
                        "records": [{"id": "rec1", "fields": {"Deck Name": "Burn"}}],
                        "offset": "itrPAGE2",
                    },
                ),
                httpx.Response(
                    200, json={"records": [{"id": "rec2", "fields": {"Deck Name": "Elves"}}]}
                ),
            ]
        )

        async with AirtableClient(sync_config) as client:
            rows = await client.fetch_all_rows()

        assert [row.id for row in rows] == ["rec1", "rec2"]
        assert rows[1].get("Deck Name") == TextValue("Elves")
        assert route.call_count == 2
        assert "offset" not in route.calls[0].request.url.params
        assert route.calls[1].request.url.params["offset"] == "itrPAGE2"

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_sort_page_size_and_auth(self, sync_config: SyncConfig) -> None:
        """Every page request is authenticated and sorted newest first."""
        route = respx.get(TABLE_URL).mock(return_value=httpx.Response(200, json={"records": []}))

        async with AirtableClient(sync_config) as client:
            rows = await client.fetch_all_rows()

        assert rows == []
        request = route.calls[0].request
        assert request.headers["Authorization"] == "Bearer patTEST"
        assert request.url.params["pageSize"] == "100"
        assert request.url.params["sort[0][field]"] == "Date Updated"
        assert request.url.params["sort[0][direction]"] == "desc"

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_carries_status_and_body(self, sync_config: SyncConfig) -> None:
        """Non-success responses raise SourceFetchError."""
        respx.get(TABLE_URL).mock(
            return_value=httpx.Response(401, text='{"error": "AUTHENTICATION_REQUIRED"}')
        )

        async with AirtableClient(sync_config) as client:
            with pytest.raises(SourceFetchError) as exc_info:
                await client.fetch_all_rows()

        assert exc_info.value.status_code == 401
        assert "AUTHENTICATION_REQUIRED" in exc_info.value.body

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_on_later_page_stops_iteration(self, sync_config: SyncConfig) -> None:
        """A failure on page two aborts the whole fetch."""
        respx.get(TABLE_URL).mock(
            side_effect=[
                httpx.Response(200, json={"records": [], "offset": "itr2"}),
                httpx.Response(503, text="Service Unavailable"),
            ]
        )

        async with AirtableClient(sync_config) as client:
            with pytest.raises(SourceFetchError, match="503"):
                await client.fetch_all_rows()


class TestIterPages:
    @pytest.mark.asyncio
    @respx.mock
    async def test_yields_one_list_per_page(self, sync_config: SyncConfig) -> None:
        """Pages are yielded lazily in order."""
        respx.get(TABLE_URL).mock(
            side_effect=[
                httpx.Response(200, json={"records": [{"id": "a"}, {"id": "b"}], "offset": "x"}),
                httpx.Response(200, json={"records": [{"id": "c"}]}),
            ]
        )

        async with AirtableClient(sync_config) as client:
            pages = [[row.id for row in page] async for page in client.iter_pages()]

        assert pages == [["a", "b"], ["c"]]


class TestFetchAttachmentText:
    @pytest.mark.asyncio
    @respx.mock
    async def test_returns_body_without_auth(self, sync_config: SyncConfig) -> None:
        """Attachment URLs are fetched without the bearer token."""
        route = respx.get("https://dl.airtable.com/list.txt").mock(
            return_value=httpx.Response(200, text="4 Shock")
        )

        async with AirtableClient(sync_config) as client:
            text = await client.fetch_attachment_text("https://dl.airtable.com/list.txt")

        assert text == "4 Shock"
        assert "Authorization" not in route.calls[0].request.headers

    @pytest.mark.asyncio
    @respx.mock
    async def test_raises_on_http_error(self, sync_config: SyncConfig) -> None:
        """Failed downloads raise AttachmentFetchError."""
        respx.get("https://dl.airtable.com/gone.txt").mock(return_value=httpx.Response(410))

        async with AirtableClient(sync_config) as client:
            with pytest.raises(AttachmentFetchError) as exc_info:
                await client.fetch_attachment_text("https://dl.airtable.com/gone.txt")

        assert exc_info.value.status_code == 410
        assert exc_info.value.url == "https://dl.airtable.com/gone.txt"
