"""
solomon_draft/draft_engine.py
Split-and-choose draft state machine.

Every transition takes a DraftState and returns a new one. The input state
is never modified, so a call that raises leaves the caller's state exactly
as it was. Dealing the next pack after a choice is a separate step
(`deal_pack`), composed by `choose_pile_and_deal` for callers that want the
automatic cascade.

Phase cycle per round: P1-split -> P2-choose -> P2-split -> P1-choose.
"""

import random
from collections import Counter, defaultdict, deque
from typing import List, Optional, Sequence
from pydantic import BaseModel, Field
from solomon_draft import constants
from solomon_draft.constants import ActionType, DraftActionType, Phase, Seat
from solomon_draft.errors import InvalidStateError, NotFoundError, ValidationError
from solomon_draft.history import HistoryLedger
from solomon_draft.logger import create_logger
from solomon_draft.models import (
    CardRef,
    Collection,
    DraftSettings,
    HistoryEntry,
    Pack,
    PackDealtPayload,
    PackSplitPayload,
    Pile,
    PileChosenPayload,
    add_to_collection,
    empty_collection,
)
from solomon_draft.pool_codec import NameResolver, build_pool, build_pool_from_seed

logger = create_logger()


class DraftState(BaseModel):
    settings: DraftSettings
    pool: List[CardRef] = Field(default_factory=list)
    current_round: int = Field(default=1, ge=1)
    current_pack: int = Field(default=1, ge=1, le=constants.PACKS_PER_ROUND)
    current_phase: Phase = Phase.P1_SPLIT
    active_pack: Optional[Pack] = None
    p1_collection: Collection = Field(default_factory=empty_collection)
    p2_collection: Collection = Field(default_factory=empty_collection)
    is_complete: bool = False
    history: HistoryLedger = Field(default_factory=HistoryLedger)


class DraftAction(BaseModel):
    """Serializable action envelope, suitable for sending to a remote owner of the state"""

    action_type: DraftActionType
    piles: Optional[List[Pile]] = None
    pile_id: Optional[str] = None


def splitter_for(phase: Phase) -> Seat:
    return Seat.P1 if phase in (Phase.P1_SPLIT, Phase.P2_CHOOSE) else Seat.P2


def chooser_for(phase: Phase) -> Seat:
    return Seat.P2 if phase in (Phase.P1_SPLIT, Phase.P2_CHOOSE) else Seat.P1


def remaining_cards(state: DraftState) -> int:
    return len(state.pool)


def create_draft(
    cards: Sequence[CardRef],
    pack_size: int,
    rounds: int,
    rng: Optional[random.Random] = None,
) -> DraftState:
    """Start a fresh draft from a resolved card list"""
    pool, seed = build_pool(cards, pack_size, rounds, rng)
    settings = DraftSettings(pack_size=pack_size, number_of_rounds=rounds, seed=seed)
    return DraftState(settings=settings, pool=pool)


def create_seeded_draft(
    seed: str, resolve_names: NameResolver, pack_size: int, rounds: int
) -> DraftState:
    """Start a draft that replays the pool order recorded in a seed"""
    pool = build_pool_from_seed(seed, resolve_names, pack_size, rounds)
    settings = DraftSettings(pack_size=pack_size, number_of_rounds=rounds, seed=seed)
    return DraftState(settings=settings, pool=pool)


def deal_pack(state: DraftState) -> DraftState:
    """
    Deal the next pack from the front of the pool.

    When fewer than pack_size cards remain the draft is marked complete
    instead and no pack is dealt.
    """
    if state.is_complete:
        raise InvalidStateError("The draft is already complete")
    if state.active_pack is not None:
        raise InvalidStateError("A pack is already active")

    new_state = state.model_copy(deep=True)
    pack_size = state.settings.pack_size

    if len(new_state.pool) < pack_size:
        new_state.is_complete = True
        logger.info(
            "Draft complete at round %d, pack %d with %d cards left in the pool",
            state.current_round,
            state.current_pack,
            len(new_state.pool),
        )
        return new_state

    cards = tuple(new_state.pool[:pack_size])
    new_state.pool = new_state.pool[pack_size:]
    pack = Pack(id=f"pack-{state.current_round}-{state.current_pack}", cards=cards)
    new_state.active_pack = pack
    new_state.history = new_state.history.append(
        HistoryEntry(
            round=state.current_round,
            phase=state.current_phase,
            action_type=ActionType.PACK_DEALT,
            payload=PackDealtPayload(pack_id=pack.id, pack_cards=cards),
        )
    )
    logger.debug("Dealt %s (%d cards left in pool)", pack.id, len(new_state.pool))
    return new_state


def _validate_split(pack: Pack, piles: Sequence[Pile]) -> None:
    if len(piles) != 2:
        raise ValidationError(
            f"A pack must be split into exactly two piles, got {len(piles)}"
        )
    if any(len(pile.cards) == 0 for pile in piles):
        raise ValidationError("Each pile must contain at least one card")
    if piles[0].id == piles[1].id:
        raise ValidationError(f"Pile ids must differ, both are '{piles[0].id}'")

    expected = Counter(card.id for card in pack.cards)
    assigned = Counter(card.id for pile in piles for card in pile.cards)
    if assigned != expected:
        missing = sorted((expected - assigned).elements())
        unexpected = sorted((assigned - expected).elements())
        raise ValidationError(
            "All cards must be assigned to exactly one pile "
            f"(missing: {missing}, unexpected: {unexpected})"
        )


def _piles_from_pack(pack: Pack, piles: Sequence[Pile]) -> List[Pile]:
    """
    Rebuild validated piles from the pack's own cards so only card data that
    was dealt from the pool reaches the collections and the history.
    """
    by_id = defaultdict(deque)
    for card in pack.cards:
        by_id[card.id].append(card)
    return [
        Pile(id=pile.id, cards=tuple(by_id[card.id].popleft() for card in pile.cards))
        for pile in piles
    ]


def split_pack(state: DraftState, piles: Sequence[Pile]) -> DraftState:
    """Attach the splitter's two piles to the active pack and hand over to the chooser"""
    if state.is_complete:
        raise InvalidStateError("The draft is already complete")
    if state.current_phase not in constants.SPLIT_PHASES:
        raise InvalidStateError(f"Cannot split during {state.current_phase.value}")
    if state.active_pack is None:
        raise InvalidStateError("No active pack to split")
    if state.active_pack.piles is not None:
        raise InvalidStateError(f"{state.active_pack.id} has already been split")

    _validate_split(state.active_pack, list(piles))
    piles = _piles_from_pack(state.active_pack, piles)

    splitter = splitter_for(state.current_phase)
    new_state = state.model_copy(deep=True)
    new_state.active_pack = new_state.active_pack.model_copy(
        update={"piles": (piles[0], piles[1])}
    )
    new_state.history = new_state.history.append(
        HistoryEntry(
            round=state.current_round,
            phase=state.current_phase,
            action_type=ActionType.PACK_SPLIT,
            payload=PackSplitPayload(
                pack_id=state.active_pack.id,
                splitter=splitter,
                piles=(piles[0], piles[1]),
            ),
        )
    )
    new_state.current_phase = (
        Phase.P2_CHOOSE if state.current_phase == Phase.P1_SPLIT else Phase.P1_CHOOSE
    )
    logger.debug(
        "%s split %s into %d/%d",
        splitter.value,
        state.active_pack.id,
        len(piles[0].cards),
        len(piles[1].cards),
    )
    return new_state


def choose_pile(state: DraftState, pile_id: str) -> DraftState:
    """
    Give the chosen pile to the chooser and the other pile to the splitter,
    then advance to the next pack. The next pack is not dealt here.
    """
    if state.is_complete:
        raise InvalidStateError("The draft is already complete")
    if state.current_phase not in constants.CHOOSE_PHASES:
        raise InvalidStateError(f"Cannot choose during {state.current_phase.value}")
    if state.active_pack is None or state.active_pack.piles is None:
        raise InvalidStateError("No active pack with piles")

    piles = state.active_pack.piles
    if piles[0].id == pile_id:
        chosen, other = piles
    elif piles[1].id == pile_id:
        other, chosen = piles
    else:
        raise NotFoundError(f"Invalid pile selection: '{pile_id}'")

    chooser = chooser_for(state.current_phase)
    new_state = state.model_copy(deep=True)
    if chooser == Seat.P1:
        choosing, splitting = new_state.p1_collection, new_state.p2_collection
    else:
        choosing, splitting = new_state.p2_collection, new_state.p1_collection

    for card in chosen.cards:
        add_to_collection(choosing, card)
    for card in other.cards:
        add_to_collection(splitting, card)

    new_state.history = new_state.history.append(
        HistoryEntry(
            round=state.current_round,
            phase=state.current_phase,
            action_type=ActionType.PILE_CHOSEN,
            payload=PileChosenPayload(
                chooser=chooser,
                chosen_pile=chosen.id,
                chosen_cards=chosen.cards,
                remaining_cards=other.cards,
            ),
        )
    )

    if state.current_pack == 1:
        new_state.current_phase = Phase.P2_SPLIT
        new_state.current_pack = 2
    else:
        new_state.current_phase = Phase.P1_SPLIT
        new_state.current_pack = 1
        new_state.current_round = state.current_round + 1
    new_state.active_pack = None

    logger.debug("%s chose %s from %s", chooser.value, chosen.id, state.active_pack.id)
    return new_state


def choose_pile_and_deal(state: DraftState, pile_id: str) -> DraftState:
    """Choose a pile, then deal the next pack (or complete the draft)"""
    return deal_pack(choose_pile(state, pile_id))


def perform_action(state: DraftState, action: DraftAction) -> DraftState:
    if action.action_type == DraftActionType.DEAL_PACK:
        return deal_pack(state)
    if action.action_type == DraftActionType.SPLIT_PACK:
        if action.piles is None:
            raise ValidationError("A split-pack action requires piles")
        return split_pack(state, action.piles)
    if action.action_type == DraftActionType.CHOOSE_PILE:
        if action.pile_id is None:
            raise ValidationError("A choose-pile action requires a pile id")
        return choose_pile(state, action.pile_id)
    raise InvalidStateError(f"Unknown action: {action.action_type}")
