import pytest
from solomon_draft.constants import ActionType, ColorBucket, Phase, Seat
from solomon_draft.history import HistoryLedger, replay_collections
from solomon_draft.models import (
    HistoryEntry,
    PackDealtPayload,
    Pile,
    PileChosenPayload,
    color_bucket,
)


@pytest.fixture
def dealt_entry(card_factory):
    return HistoryEntry(
        round=1,
        phase=Phase.P1_SPLIT,
        action_type=ActionType.PACK_DEALT,
        payload=PackDealtPayload(pack_id="pack-1-1", pack_cards=(card_factory("A"),)),
    )


def test_append_returns_new_ledger(dealt_entry):
    ledger = HistoryLedger()
    extended = ledger.append(dealt_entry)

    assert len(ledger) == 0
    assert len(extended) == 1
    assert extended.last() == dealt_entry
    assert ledger.last() is None


def test_entries_are_immutable(dealt_entry):
    ledger = HistoryLedger().append(dealt_entry)
    with pytest.raises(Exception):
        dealt_entry.round = 4
    with pytest.raises(Exception):
        ledger.entries = ()
    assert ledger.entries[0].round == 1


def test_queries(card_factory, dealt_entry):
    chosen = HistoryEntry(
        round=2,
        phase=Phase.P2_CHOOSE,
        action_type=ActionType.PILE_CHOSEN,
        payload=PileChosenPayload(
            chooser=Seat.P2,
            chosen_pile="left",
            chosen_cards=(card_factory("B", "U"),),
            remaining_cards=(card_factory("C", "WB"),),
        ),
    )
    ledger = HistoryLedger().append(dealt_entry).append(chosen)

    assert ledger.of_type(ActionType.PILE_CHOSEN) == (chosen,)
    assert ledger.for_round(1) == (dealt_entry,)
    assert ledger.for_round(3) == ()

    p1, p2 = replay_collections(ledger)
    assert [c.name for c in p2[ColorBucket.BLUE]] == ["B"]
    assert [c.name for c in p1[ColorBucket.MULTICOLOR]] == ["C"]


def test_entry_ids_are_unique(dealt_entry):
    other = HistoryEntry(
        round=dealt_entry.round,
        phase=dealt_entry.phase,
        action_type=dealt_entry.action_type,
        payload=dealt_entry.payload,
    )
    assert dealt_entry.id.startswith("action-")
    assert dealt_entry.id != other.id


def test_payload_discriminator_round_trip(card_factory):
    a, b = card_factory("A"), card_factory("B", "R")
    entry = HistoryEntry(
        round=1,
        phase=Phase.P1_SPLIT,
        action_type=ActionType.PACK_SPLIT,
        payload={
            "kind": "pack-split",
            "pack_id": "pack-1-1",
            "splitter": "P1",
            "piles": [Pile(id="x", cards=(a,)), Pile(id="y", cards=(b,))],
        },
    )
    restored = HistoryEntry.model_validate_json(entry.model_dump_json())
    assert restored.payload.splitter == Seat.P1
    assert restored.payload.piles[1].cards == (b,)


@pytest.mark.parametrize(
    "colors, bucket",
    [
        ("", ColorBucket.COLORLESS),
        ("W", ColorBucket.WHITE),
        ("U", ColorBucket.BLUE),
        ("B", ColorBucket.BLACK),
        ("R", ColorBucket.RED),
        ("G", ColorBucket.GREEN),
        ("WU", ColorBucket.MULTICOLOR),
        ("WUBRG", ColorBucket.MULTICOLOR),
    ],
)
def test_color_bucket(card_factory, colors, bucket):
    assert color_bucket(card_factory("Card", colors)) == bucket
