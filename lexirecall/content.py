"""
Pydantic models for word documents supplied by the content store.

The scheduler only needs an Item per word; these models validate the raw
documents (camelCase keys as exported by the word library, or snake_case)
before they are turned into Items.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from pydantic import BaseModel, Field, ValidationError

from lexirecall.memory.memory_state import Item


logger = logging.getLogger(__name__)


MAX_TAGS = 20


class WordEntry(BaseModel):
    """
    A single word document.

    One document per item id. Learning state is never read from here.
    """
    id: str = Field(..., min_length=1, description="Stable item identifier")
    term: str = Field(..., min_length=1, description="The word or phrase being learned")
    definition: str = Field(default="", description="Meaning shown on the back of the card")

    # Optional presentation details
    phonetic: Optional[str] = None
    example_sentence: Optional[str] = Field(default=None, alias="exampleSentence")
    example_translation: Optional[str] = Field(default=None, alias="exampleTranslation")

    tags: list[str] = Field(default_factory=list, max_length=MAX_TAGS)
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    class Config:
        populate_by_name = True  # Accept both field names and camelCase aliases

    def to_item(self) -> Item:
        return Item(
            item_id=self.id,
            term=self.term,
            definition=self.definition,
            example=self.example_sentence,
            tags=tuple(self.tags),
        )


def load_items(documents: Iterable[dict], strict: bool = False) -> list[Item]:
    """
    Validate word documents and convert them to Items.

    Args:
        documents: Raw documents from the content store
        strict: If True, the first invalid document raises instead of being skipped

    Returns:
        Items in document order; later duplicates of an id are dropped

    Raises:
        ValidationError: An invalid document was found and strict is True
    """
    items: list[Item] = []
    seen: set[str] = set()

    for document in documents:
        try:
            entry = WordEntry.model_validate(document)
        except ValidationError as exc:
            if strict:
                raise
            logger.warning(
                "[CONTENT] Skipping invalid word document %r: %d error(s)",
                document.get("id") if isinstance(document, dict) else None,
                exc.error_count(),
            )
            continue

        if entry.id in seen:
            logger.debug("[CONTENT] Duplicate word document %s ignored", entry.id)
            continue
        seen.add(entry.id)
        items.append(entry.to_item())

    return items
