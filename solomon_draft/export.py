"""
solomon_draft/export.py
Deck list text export for each seat's collection.
"""

import json
import os
from typing import Dict
from solomon_draft import constants
from solomon_draft.history import HistoryLedger
from solomon_draft.logger import create_logger
from solomon_draft.models import Collection, collection_cards

logger = create_logger()


def format_deck_list(collection: Collection) -> str:
    """
    One "<quantity> <name>" line per card name, quantities summed across
    buckets, sorted by name.
    """
    quantities: Dict[str, int] = {}
    for card in collection_cards(collection):
        quantities[card.name] = quantities.get(card.name, 0) + card.quantity
    return "\n".join(
        f"{quantity} {name}"
        for name, quantity in sorted(
            quantities.items(), key=lambda item: (item[0].casefold(), item[0])
        )
    )


def format_draft_results(p1_collection: Collection, p2_collection: Collection) -> str:
    return (
        f"{constants.EXPORT_P1_HEADER}\n{format_deck_list(p1_collection)}"
        f"\n\n{constants.EXPORT_P2_HEADER}\n{format_deck_list(p2_collection)}"
    )


def write_deck_list(text: str, file_location: str) -> bool:
    try:
        folder = os.path.dirname(str(file_location))
        if folder and not os.path.exists(folder):
            os.makedirs(folder)
        with open(file_location, "w", encoding="utf-8") as deck_file:
            deck_file.write(text)
        return True
    except OSError as error:
        logger.error("Failed to save deck list to %s: %s", file_location, error)
        return False


def export_history_to_json(history: HistoryLedger) -> str:
    output = []
    for entry in history.entries:
        output.append(entry.model_dump(mode="json"))
    return json.dumps(output, ensure_ascii=False, indent=4)
