"""
solomon_draft/models.py
Data models shared by the pool codec, the draft engine and the history ledger.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, FrozenSet, List, Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, computed_field
from solomon_draft.constants import (
    ActionType,
    Color,
    ColorBucket,
    PACKS_PER_ROUND,
    Phase,
    Seat,
)


class CardMetadata(BaseModel):
    """Card data returned by the card catalog"""

    id: str
    name: str
    color_identity: List[Color] = Field(default_factory=list)
    image_url: str = ""
    mana_cost: str = ""
    type_line: str = ""
    cmc: float = 0.0
    rarity: str = ""
    set_code: str = ""

    def to_card_ref(self, quantity: int = 1) -> "CardRef":
        return CardRef(
            id=self.id,
            name=self.name,
            color_identity=frozenset(self.color_identity),
            quantity=quantity,
            image_url=self.image_url,
        )


class CardRef(BaseModel):
    """A pool entry. Pile and pool membership is decided by id"""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    color_identity: FrozenSet[Color] = frozenset()
    quantity: int = Field(default=1, ge=1)
    image_url: str = ""


class SeedCard(BaseModel):
    """The (name, quantity) pair recorded in a seed"""

    model_config = ConfigDict(frozen=True)

    name: str
    quantity: int = Field(default=1, ge=1)


class Pile(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    cards: Tuple[CardRef, ...] = ()


class Pack(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    cards: Tuple[CardRef, ...] = ()
    piles: Optional[Tuple[Pile, Pile]] = None


class DraftSettings(BaseModel):
    pack_size: int = Field(ge=1)
    number_of_rounds: int = Field(ge=1)
    seed: str = ""

    @computed_field
    @property
    def pool_size(self) -> int:
        return PACKS_PER_ROUND * self.pack_size * self.number_of_rounds


class PackDealtPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["pack-dealt"] = "pack-dealt"
    pack_id: str
    pack_cards: Tuple[CardRef, ...]


class PackSplitPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["pack-split"] = "pack-split"
    pack_id: str
    splitter: Seat
    piles: Tuple[Pile, Pile]


class PileChosenPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["pile-chosen"] = "pile-chosen"
    chooser: Seat
    chosen_pile: str
    chosen_cards: Tuple[CardRef, ...]
    remaining_cards: Tuple[CardRef, ...]


HistoryPayload = Union[PackDealtPayload, PackSplitPayload, PileChosenPayload]


def new_entry_id() -> str:
    return f"action-{uuid.uuid4().hex[:12]}"


class HistoryEntry(BaseModel):
    """A single accepted action. Never modified once created"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_entry_id)
    round: int
    phase: Phase
    action_type: ActionType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    payload: HistoryPayload = Field(discriminator="kind")


Collection = Dict[ColorBucket, List[CardRef]]


def empty_collection() -> Collection:
    return {bucket: [] for bucket in ColorBucket}


def color_bucket(card: CardRef) -> ColorBucket:
    """
    Map a card to its collection bucket.

    No colors files the card under Colorless, one color under that color,
    and anything more under Multicolor.
    """
    identity = card.color_identity
    if len(identity) == 0:
        return ColorBucket.COLORLESS
    if len(identity) == 1:
        return ColorBucket(next(iter(identity)).value)
    return ColorBucket.MULTICOLOR


def add_to_collection(collection: Collection, card: CardRef) -> None:
    collection.setdefault(color_bucket(card), []).append(card)


def collection_cards(collection: Collection) -> List[CardRef]:
    """Flatten a collection in bucket order"""
    cards = []
    for bucket in ColorBucket:
        cards.extend(collection.get(bucket, []))
    return cards


def collection_size(collection: Collection) -> int:
    return sum(len(cards) for cards in collection.values())
