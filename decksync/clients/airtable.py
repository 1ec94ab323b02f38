"""
Airtable REST client.

Lists a table page by page, following the opaque "offset" cursor each page
returns, always sorted by the deck's last-updated field descending. Also
downloads attachment bodies, which Airtable serves from pre-signed URLs.

No retries: a non-success response ends the sync.
"""

import logging
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import quote

import httpx

from decksync.config import SyncConfig
from decksync.models.failure import AttachmentFetchError, SourceFetchError
from decksync.models.source import SourceRow

logger = logging.getLogger(__name__)

PAGE_SIZE = 100

# Column the listing is ordered by (newest first)
SORT_FIELD = "Date Updated"
SORT_DIRECTION = "desc"


class AirtableClient:
    """
    Thin async wrapper over the Airtable list-records endpoint.

    The client owns an httpx.AsyncClient unless one is passed in; use it as
    an async context manager so the connection pool is closed.
    """

    def __init__(self, config: SyncConfig, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.http_timeout)

    async def __aenter__(self) -> "AirtableClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def table_url(self) -> str:
        base = quote(self._config.base_id, safe="")
        table = quote(self._config.table_name, safe="")
        return f"{self._config.api_url}/{base}/{table}"

    def _page_params(self, offset: str | None) -> list[tuple[str, Any]]:
        # Airtable expects bracketed sort keys, which a plain dict cannot express
        params: list[tuple[str, Any]] = [
            ("pageSize", PAGE_SIZE),
            ("sort[0][field]", SORT_FIELD),
            ("sort[0][direction]", SORT_DIRECTION),
        ]
        if offset:
            params.append(("offset", offset))
        return params

    async def iter_pages(self) -> AsyncIterator[list[SourceRow]]:
        """
        Yield the table one page at a time.

        Pages are requested sequentially because each cursor comes from the
        previous response. The generator is finite and not restartable.

        Raises:
            SourceFetchError: On any non-2xx response; iteration stops there
        """
        headers = {"Authorization": f"Bearer {self._config.token}"}
        offset: str | None = None
        page_number = 0

        while True:
            response = await self._client.get(
                self.table_url, params=self._page_params(offset), headers=headers
            )
            if not response.is_success:
                raise SourceFetchError(response.status_code, response.text)

            payload = response.json()
            page_number += 1
            rows = [SourceRow.from_api(record) for record in payload.get("records") or []]
            logger.debug("Fetched page %d with %d rows", page_number, len(rows))
            yield rows

            offset = payload.get("offset")
            if not offset:
                break

    async def fetch_all_rows(self) -> list[SourceRow]:
        """
        Fetch every row of the table in sort order.

        Returns:
            All rows, most recently updated first

        Raises:
            SourceFetchError: If any page request fails
        """
        rows: list[SourceRow] = []
        async for page in self.iter_pages():
            rows.extend(page)
        return rows

    async def fetch_attachment_text(self, url: str) -> str:
        """
        Download an attachment body as text.

        Attachment URLs are pre-signed, so no Authorization header is sent.

        Raises:
            AttachmentFetchError: On a non-2xx response
        """
        response = await self._client.get(url, follow_redirects=True)
        if not response.is_success:
            raise AttachmentFetchError(url, response.status_code)
        return response.text
