"""
solomon_draft/deck_lists.py
Retrieves deck and cube lists from Moxfield, CubeCobra or pasted text.
"""

import re
from typing import Dict, List, Optional
import requests
from pydantic import BaseModel, Field
from solomon_draft import constants
from solomon_draft.configuration import DeckListSettings
from solomon_draft.errors import DeckListError, NetworkError
from solomon_draft.logger import create_logger

logger = create_logger()

MOXFIELD_URL_PATTERN = re.compile(r"moxfield\.com/decks/([a-zA-Z0-9_-]+)")
CUBECOBRA_URL_PATTERN = re.compile(r"cubecobra\.com/cube/(?:list|overview)/([a-zA-Z0-9_-]+)")
DECK_LINE_PATTERN = re.compile(r"^(\d+)\s+(.+)$")


class DeckListEntry(BaseModel):
    name: str
    quantity: int = Field(default=1, ge=1)


class DeckList(BaseModel):
    url: str = ""
    source: str = constants.DECK_SOURCE_RAW_TEXT
    cards: List[DeckListEntry] = Field(default_factory=list)


def parse_deck_list_text(text: str) -> List[DeckListEntry]:
    """
    Parse "<quantity> <name>" lines.

    Input Example:
        "4 Lightning Bolt\\n1 Fire // Ice"

    Output Example:
        [DeckListEntry(name="Lightning Bolt", quantity=4),
         DeckListEntry(name="Fire // Ice", quantity=1)]
    """
    entries = []
    for line in text.splitlines():
        match = DECK_LINE_PATTERN.match(line.strip())
        if not match:
            continue
        quantity = int(match.group(1))
        name = match.group(2).strip()
        if quantity < 1 or not name:
            continue
        entries.append(DeckListEntry(name=name, quantity=quantity))
    return entries


def is_deck_list_url(value: str) -> bool:
    return bool(MOXFIELD_URL_PATTERN.search(value) or CUBECOBRA_URL_PATTERN.search(value))


class DeckListSource:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        settings: Optional[DeckListSettings] = None,
    ):
        self.session = session or requests.Session()
        self.settings = settings or DeckListSettings()

    def resolve(self, url: str) -> DeckList:
        if "moxfield.com" in url:
            return self.parse_moxfield_url(url)
        if "cubecobra.com" in url:
            return self.parse_cubecobra_url(url)
        raise DeckListError("Unsupported deck list URL. Please use Moxfield or CubeCobra.")

    def parse_raw_text(self, text: str) -> DeckList:
        cards = parse_deck_list_text(text)
        if not cards:
            raise DeckListError("No cards found in deck list")
        return DeckList(url=constants.DECK_SOURCE_RAW_TEXT, cards=cards)

    def _get(self, url: str) -> requests.Response:
        try:
            response = self.session.get(
                url, headers=constants.API_HEADERS, timeout=self.settings.timeout
            )
        except requests.exceptions.RequestException as error:
            raise NetworkError(f"Failed to fetch {url}: {error}") from error

        if not 200 <= response.status_code < 300:
            raise DeckListError(
                f"Failed to fetch deck list: {response.status_code} {response.reason}"
            )
        return response

    def parse_moxfield_url(self, url: str) -> DeckList:
        match = MOXFIELD_URL_PATTERN.search(url)
        if not match:
            raise DeckListError("Invalid Moxfield URL format")

        response = self._get(f"{constants.URL_MOXFIELD_API}{match.group(1)}")
        try:
            mainboard: Dict = response.json().get("mainboard") or {}
        except (ValueError, AttributeError) as error:
            raise DeckListError(f"Failed to parse Moxfield deck: {error}") from error

        cards = []
        for name, value in mainboard.items():
            # Older responses map name -> count, newer ones name -> {"quantity": n, "card": {...}}
            quantity = value.get("quantity", 1) if isinstance(value, dict) else value
            try:
                cards.append(DeckListEntry(name=name, quantity=int(quantity)))
            except (TypeError, ValueError) as error:
                logger.warning("Skipping Moxfield entry %s: %s", name, error)

        if not cards:
            raise DeckListError("No cards found in Moxfield deck")
        logger.info("Loaded %d entries from Moxfield deck %s", len(cards), match.group(1))
        return DeckList(url=url, source=constants.DECK_SOURCE_MOXFIELD, cards=cards)

    def parse_cubecobra_url(self, url: str) -> DeckList:
        match = CUBECOBRA_URL_PATTERN.search(url)
        if not match:
            raise DeckListError(
                "Invalid CubeCobra URL format. Expected format: "
                "https://cubecobra.com/cube/list/[cube-id] or "
                "https://cubecobra.com/cube/overview/[cube-id]"
            )

        response = self._get(f"{constants.URL_CUBECOBRA_LIST_API}{match.group(1)}")
        names = [line.strip() for line in response.text.splitlines() if line.strip()]
        if not names:
            raise DeckListError("No cards found in cube")

        logger.info("Loaded %d cards from cube %s", len(names), match.group(1))
        return DeckList(
            url=url,
            source=constants.DECK_SOURCE_CUBECOBRA,
            cards=[DeckListEntry(name=name, quantity=1) for name in names],
        )
