"""
solomon_draft/scryfall.py
Card catalog backed by the Scryfall collection endpoint.
Lookups are batched and paced by an injected TokenBucket. A batch that
fails is retried one card at a time.
"""

from typing import Callable, Dict, Iterable, List, Optional
import pydantic
import requests
from solomon_draft import constants
from solomon_draft.configuration import CatalogSettings
from solomon_draft.errors import CatalogLookupError, CatalogThrottledError, NetworkError
from solomon_draft.logger import create_logger
from solomon_draft.models import CardMetadata
from solomon_draft.rate_limiter import TokenBucket

logger = create_logger()


def card_from_scryfall(card: Dict) -> CardMetadata:
    """Convert a Scryfall card object into CardMetadata"""
    faces = card.get("card_faces") or [{}]
    front = faces[0]
    image_uris = card.get("image_uris") or front.get("image_uris") or {}
    return CardMetadata(
        id=card["id"],
        name=card["name"],
        color_identity=[
            c for c in card.get("color_identity", []) if c in constants.CARD_COLORS
        ],
        image_url=image_uris.get("normal", ""),
        mana_cost=card.get("mana_cost") or front.get("mana_cost", ""),
        type_line=card.get("type_line") or front.get("type_line", ""),
        cmc=card.get("cmc", 0.0),
        rarity=card.get("rarity", ""),
        set_code=card.get("set", ""),
    )


class ScryfallCatalog:
    HEADERS = {
        **constants.API_HEADERS,
        "Content-Type": "application/json",
    }

    def __init__(
        self,
        scheduler: Optional[TokenBucket] = None,
        session: Optional[requests.Session] = None,
        settings: Optional[CatalogSettings] = None,
    ):
        self.settings = settings or CatalogSettings()
        self.scheduler = scheduler or TokenBucket(
            self.settings.requests_per_second, self.settings.burst
        )
        self.session = session or requests.Session()

    @property
    def collection_url(self) -> str:
        return f"{self.settings.base_url}{constants.SCRYFALL_COLLECTION_ENDPOINT}"

    def resolve_by_name(self, names: Iterable[str]) -> Dict[str, CardMetadata]:
        """
        Look up cards by name. The result is keyed by the requested name;
        names Scryfall does not know are left out.

        A double-faced or split card also answers to its front face name, and
        matching ignores case.
        """
        requested = list(dict.fromkeys(name for name in names if name and name.strip()))
        if not requested:
            return {}

        cards = self._fetch_collection([{"name": name} for name in requested])
        index = {}
        for card in cards:
            index.setdefault(card.name.lower(), card)
            index.setdefault(card.name.split(" // ")[0].lower(), card)

        return {
            name: index[name.lower()] for name in requested if name.lower() in index
        }

    def resolve_by_id(self, ids: Iterable[str]) -> Dict[str, CardMetadata]:
        """Look up cards by Scryfall id. Unknown ids are left out"""
        requested = list(dict.fromkeys(card_id for card_id in ids if card_id))
        if not requested:
            return {}

        cards = self._fetch_collection([{"id": card_id} for card_id in requested])
        return {card.id: card for card in cards}

    def _fetch_collection(self, identifiers: List[Dict[str, str]]) -> List[CardMetadata]:
        """
        POST the identifiers in batches. A batch that fails for any reason
        other than throttling is retried one card at a time.
        """
        batch_size = self.settings.batch_size
        cards = []
        for i in range(0, len(identifiers), batch_size):
            batch = identifiers[i : i + batch_size]
            try:
                cards.extend(self._post_batch(batch))
            except CatalogThrottledError:
                raise
            except (CatalogLookupError, NetworkError) as error:
                logger.warning(
                    "Batch search failed, falling back to individual searches: %s", error
                )
                cards.extend(self._fetch_individually(batch))
        logger.info(
            "Resolved %d of %d cards from Scryfall", len(cards), len(identifiers)
        )
        return cards

    def _fetch_individually(self, batch: List[Dict[str, str]]) -> List[CardMetadata]:
        cards = []
        network_errors = []
        for identifier in batch:
            try:
                card = self._lookup_single(identifier)
            except CatalogThrottledError:
                raise
            except NetworkError as error:
                network_errors.append(error)
                logger.warning("Failed to fetch card %s: %s", identifier, error)
                continue
            except CatalogLookupError as error:
                logger.warning("Failed to fetch card %s: %s", identifier, error)
                continue
            if card is not None:
                cards.append(card)

        # Nothing got through at all, so the catalog is unreachable
        if network_errors and len(network_errors) == len(batch):
            raise network_errors[-1]
        return cards

    def _retry_after(self, response) -> float:
        value = response.headers.get("Retry-After")
        try:
            return max(0.0, float(value))
        except (TypeError, ValueError):
            return self.settings.retry_after_default

    def _send(
        self, method: Callable[..., requests.Response], url: str, **kwargs
    ) -> requests.Response:
        """Issue a paced request, waiting out 429 responses up to the retry ceiling"""
        throttled = 0
        while True:
            self.scheduler.acquire()
            try:
                response = method(
                    url, headers=self.HEADERS, timeout=self.settings.timeout, **kwargs
                )
            except requests.exceptions.RequestException as error:
                raise NetworkError(f"Scryfall request failed: {error}") from error

            if response.status_code != 429:
                return response

            throttled += 1
            if throttled > self.settings.max_throttle_retries:
                raise CatalogThrottledError(
                    f"Scryfall is still throttling after {throttled - 1} retries"
                )
            delay = self._retry_after(response)
            logger.warning("Scryfall throttled the request, retrying in %.1fs", delay)
            self.scheduler.wait(delay)

    def _post_batch(self, batch: List[Dict[str, str]]) -> List[CardMetadata]:
        response = self._send(
            self.session.post, self.collection_url, json={"identifiers": batch}
        )
        if not 200 <= response.status_code < 300:
            raise CatalogLookupError(
                f"Collection search failed: {response.status_code} {response.reason}"
            )

        try:
            data = response.json()
            not_found = data.get("not_found") or []
            if not_found:
                logger.warning(
                    "Cards not found in batch: %s",
                    [nf.get("name") or nf.get("id") for nf in not_found],
                )
            return [card_from_scryfall(card) for card in data.get("data", [])]
        except (ValueError, KeyError, AttributeError, pydantic.ValidationError) as error:
            raise CatalogLookupError(f"Unreadable Scryfall response: {error}") from error

    def _lookup_single(self, identifier: Dict[str, str]) -> Optional[CardMetadata]:
        """
        Fetch one card: an exact-name search for name identifiers, the card
        endpoint for id identifiers. Returns None when Scryfall has no match.
        """
        base_url = self.settings.base_url
        if "id" in identifier:
            response = self._send(
                self.session.get,
                f"{base_url}{constants.SCRYFALL_CARD_ENDPOINT}{identifier['id']}",
            )
        else:
            response = self._send(
                self.session.get,
                f"{base_url}{constants.SCRYFALL_SEARCH_ENDPOINT}",
                params={"q": f'!"{identifier["name"]}"'},
            )

        if response.status_code == 404:
            return None
        if not 200 <= response.status_code < 300:
            raise CatalogLookupError(
                f"Scryfall API error: {response.status_code} {response.reason}"
            )

        try:
            data = response.json()
            if "id" in identifier:
                return card_from_scryfall(data)
            results = data.get("data") or []
            return card_from_scryfall(results[0]) if results else None
        except (ValueError, KeyError, AttributeError, pydantic.ValidationError) as error:
            raise CatalogLookupError(f"Unreadable Scryfall response: {error}") from error
