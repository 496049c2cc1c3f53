"""
solomon_draft/session.py
Wires the draft engine to its collaborators for a UI layer.

The session owns the request scheduler shared by every catalog lookup it
makes. Collaborator I/O happens before a draft state exists; the engine
itself is only ever handed resolved cards.
"""

import os
import random
from typing import List, Optional, Tuple
from solomon_draft import constants
from solomon_draft.configuration import Configuration
from solomon_draft.constants import DraftActionType
from solomon_draft.deck_lists import DeckList, DeckListSource, is_deck_list_url
from solomon_draft.draft_engine import (
    DraftAction,
    DraftState,
    create_draft,
    create_seeded_draft,
    deal_pack,
    perform_action,
)
from solomon_draft.errors import ValidationError
from solomon_draft.export import format_deck_list, format_draft_results, write_deck_list
from solomon_draft.logger import create_logger
from solomon_draft.models import CardRef
from solomon_draft.rate_limiter import TokenBucket
from solomon_draft.scryfall import ScryfallCatalog

logger = create_logger()


class DraftSession:
    def __init__(
        self,
        configuration: Optional[Configuration] = None,
        catalog: Optional[ScryfallCatalog] = None,
        deck_lists: Optional[DeckListSource] = None,
        scheduler: Optional[TokenBucket] = None,
    ):
        self.configuration = configuration or Configuration()
        catalog_settings = self.configuration.catalog
        self.scheduler = scheduler or TokenBucket(
            catalog_settings.requests_per_second, catalog_settings.burst
        )
        self.catalog = catalog or ScryfallCatalog(self.scheduler, settings=catalog_settings)
        self.deck_lists = deck_lists or DeckListSource(settings=self.configuration.deck_lists)
        create_logger(self.configuration.settings.log_folder or None)

    def load_deck_list(self, value: str) -> DeckList:
        """Fetch a Moxfield/CubeCobra URL, or parse the value as pasted deck list text"""
        value = value.strip()
        if is_deck_list_url(value) or value.startswith(("http://", "https://")):
            return self.deck_lists.resolve(value)
        return self.deck_lists.parse_raw_text(value)

    def load_cards(self, value: str) -> List[CardRef]:
        """Resolve a deck list into catalog cards. Unknown names are dropped"""
        deck_list = self.load_deck_list(value)
        metadata = self.catalog.resolve_by_name([entry.name for entry in deck_list.cards])

        cards = []
        for entry in deck_list.cards:
            card = metadata.get(entry.name)
            if card is None:
                logger.warning("Card not found: %s", entry.name)
                continue
            cards.append(card.to_card_ref(entry.quantity))
        logger.info("Loaded %d of %d deck list entries", len(cards), len(deck_list.cards))
        return cards

    def _draft_size(self, pack_size: Optional[int], rounds: Optional[int]) -> Tuple[int, int]:
        defaults = self.configuration.draft
        pack_size = defaults.pack_size if pack_size is None else pack_size
        rounds = defaults.rounds if rounds is None else rounds
        if not defaults.pack_size_min <= pack_size <= defaults.pack_size_max:
            raise ValidationError(
                f"Pack size must be between {defaults.pack_size_min} and {defaults.pack_size_max}"
            )
        if not defaults.rounds_min <= rounds <= defaults.rounds_max:
            raise ValidationError(
                f"Rounds must be between {defaults.rounds_min} and {defaults.rounds_max}"
            )
        return pack_size, rounds

    def start_draft(
        self,
        cards: List[CardRef],
        pack_size: Optional[int] = None,
        rounds: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> DraftState:
        """Build a fresh pool and deal the first pack"""
        pack_size, rounds = self._draft_size(pack_size, rounds)
        state = create_draft(cards, pack_size, rounds, rng)
        logger.info(
            "Starting draft: %d cards per pack, %d rounds", pack_size, rounds
        )
        return deal_pack(state)

    def start_seeded_draft(
        self, seed: str, pack_size: Optional[int] = None, rounds: Optional[int] = None
    ) -> DraftState:
        """Rebuild the pool recorded in a seed and deal the first pack"""
        pack_size, rounds = self._draft_size(pack_size, rounds)
        state = create_seeded_draft(seed, self.catalog.resolve_by_name, pack_size, rounds)
        logger.info(
            "Starting seeded draft: %d cards per pack, %d rounds", pack_size, rounds
        )
        return deal_pack(state)

    def apply(self, state: DraftState, action: DraftAction) -> DraftState:
        """Apply an action, dealing the next pack after every choice"""
        new_state = perform_action(state, action)
        if action.action_type == DraftActionType.CHOOSE_PILE and not new_state.is_complete:
            new_state = deal_pack(new_state)
        return new_state

    def export_results(self, state: DraftState) -> str:
        return format_draft_results(state.p1_collection, state.p2_collection)

    def save_results(self, state: DraftState, folder: Optional[str] = None) -> bool:
        """Write each seat's deck list and the combined results to the export folder"""
        folder = folder or self.configuration.settings.export_folder or os.getcwd()
        files = {
            constants.EXPORT_P1_FILE_NAME: format_deck_list(state.p1_collection),
            constants.EXPORT_P2_FILE_NAME: format_deck_list(state.p2_collection),
            constants.EXPORT_COMBINED_FILE_NAME: self.export_results(state),
        }
        return all(
            [write_deck_list(text, os.path.join(folder, name)) for name, text in files.items()]
        )
