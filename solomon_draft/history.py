"""
solomon_draft/history.py
Append-only record of accepted draft actions.

The engine appends one entry per accepted action and never reads the
ledger back to decide a transition. The ledger exists for audit, replay and
review screens.
"""

from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict
from solomon_draft.constants import ActionType, Seat
from solomon_draft.models import (
    Collection,
    HistoryEntry,
    add_to_collection,
    empty_collection,
)


class HistoryLedger(BaseModel):
    model_config = ConfigDict(frozen=True)

    entries: Tuple[HistoryEntry, ...] = ()

    def append(self, entry: HistoryEntry) -> "HistoryLedger":
        """Return a new ledger with the entry added at the end"""
        return HistoryLedger(entries=self.entries + (entry,))

    def of_type(self, action_type: ActionType) -> Tuple[HistoryEntry, ...]:
        return tuple(e for e in self.entries if e.action_type == action_type)

    def for_round(self, round_number: int) -> Tuple[HistoryEntry, ...]:
        return tuple(e for e in self.entries if e.round == round_number)

    def last(self) -> Optional[HistoryEntry]:
        return self.entries[-1] if self.entries else None

    def __len__(self) -> int:
        return len(self.entries)


def replay_collections(ledger: HistoryLedger) -> Tuple[Collection, Collection]:
    """Rebuild both seats' collections from the pile-chosen entries"""
    p1 = empty_collection()
    p2 = empty_collection()
    for entry in ledger.of_type(ActionType.PILE_CHOSEN):
        payload = entry.payload
        chooser, splitter = (p1, p2) if payload.chooser == Seat.P1 else (p2, p1)
        for card in payload.chosen_cards:
            add_to_collection(chooser, card)
        for card in payload.remaining_cards:
            add_to_collection(splitter, card)
    return p1, p2
