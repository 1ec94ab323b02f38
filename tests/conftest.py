from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from decksync.config import SyncConfig


@pytest.fixture
def sync_config(tmp_path: Path) -> SyncConfig:
    """Config pointing at a fake base and a temporary output directory."""
    return SyncConfig(
        token="patTEST",
        base_id="appTEST",
        table_name="decks",
        output_dir=tmp_path / "data",
    )


@pytest.fixture
def sync_time() -> datetime:
    return datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_deck_list() -> str:
    """Deck list pasted with an explicit sideboard marker."""
    return """4 Lightning Bolt
4 Monastery Swiftspear
20 Mountain

Sideboard:
2 Abrade
1 Roiling Vortex"""


ApiRecordFactory = Callable[..., dict[str, Any]]


@pytest.fixture
def make_api_record() -> ApiRecordFactory:
    """Factory for items of the Airtable "records" array."""

    def _make(record_id: str, **fields: Any) -> dict[str, Any]:
        return {"id": record_id, "createdTime": "2024-01-01T00:00:00.000Z", "fields": fields}

    return _make
