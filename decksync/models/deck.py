"""
Deck records written for the static site.

Field names are snake_case in Python and camelCase on disk, because the
site's browser scripts read the JSON files directly.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DeckList(BaseModel):
    """Raw deck list text and its mainboard/sideboard split."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    raw: str = ""
    main_text: str = Field(default="", alias="mainText")
    side_text: str = Field(default="", alias="sideText")


class DeckRecord(BaseModel):
    """
    A fully normalized deck, written to decks/<slug>.json.

    Attributes:
        id: Airtable record id, stable across syncs
        slug: URL-safe key derived from name, also the output filename stem
        updated_at: ISO-8601 UTC timestamp (e.g. "2024-05-01T12:00:00.000Z")
        contains_banned_cards: Whether the list includes banned cards
        cover_card: Card shown as the deck's thumbnail
        decklist: Raw text plus main/side split
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    slug: str
    name: str = ""
    author: str = ""
    format: str = ""
    archetype: str = ""
    characteristics: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    updated_at: str = Field(alias="updatedAt")
    contains_banned_cards: bool = Field(default=False, alias="containsBannedCards")
    cover_card: str = Field(default="", alias="coverCard")
    decklist: DeckList = Field(default_factory=DeckList)

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys the site expects."""
        return self.model_dump(mode="json", by_alias=True)


class IndexEntry(BaseModel):
    """Summary of a deck for index.json. Never carries id or decklist."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    slug: str
    name: str
    author: str
    format: str
    archetype: str
    colors: list[str]
    updated_at: str = Field(alias="updatedAt")
    contains_banned_cards: bool = Field(alias="containsBannedCards")

    @classmethod
    def from_deck(cls, deck: DeckRecord) -> "IndexEntry":
        """Project a DeckRecord down to its index fields."""
        return cls(
            slug=deck.slug,
            name=deck.name,
            author=deck.author,
            format=deck.format,
            archetype=deck.archetype,
            colors=list(deck.colors),
            updated_at=deck.updated_at,
            contains_banned_cards=deck.contains_banned_cards,
        )


class DeckIndex(BaseModel):
    """Contents of index.json."""

    model_config = ConfigDict(populate_by_name=True)

    updated_at: str = Field(alias="updatedAt")
    decks: list[IndexEntry] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys the site expects."""
        return self.model_dump(mode="json", by_alias=True)
