"""
solomon_draft/pool_codec.py
Builds the draft pool and records its exact order as a shareable seed.

A seed is not a random-number-generator seed. It is the recorded
permutation itself: the ordered (name, quantity) list, serialized to JSON,
XOR-obfuscated with a fixed key and written as unpadded URL-safe base64.
The XOR step only keeps the card list from being readable at a glance. It
is NOT encryption and offers no secrecy or integrity.
"""

import base64
import binascii
import json
import random
import re
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple
import pydantic
from pydantic import TypeAdapter
from solomon_draft.constants import PACKS_PER_ROUND, SEED_OBFUSCATION_KEY
from solomon_draft.errors import InsufficientCardsError, SeedFormatError, ValidationError
from solomon_draft.logger import create_logger
from solomon_draft.models import CardMetadata, CardRef, SeedCard

logger = create_logger()

SEED_ADAPTER = TypeAdapter(List[SeedCard])

# Unpadded URL-safe base64, the only form encode_seed produces
SEED_PATTERN = re.compile(r"[A-Za-z0-9_-]*")

NameResolver = Callable[[List[str]], Mapping[str, CardMetadata]]


def calculate_pool_size(pack_size: int, rounds: int) -> int:
    if pack_size < 1 or rounds < 1:
        raise ValidationError(
            f"Pack size and rounds must be at least 1 (got {pack_size}, {rounds})"
        )
    return PACKS_PER_ROUND * pack_size * rounds


def _xor(data: bytes, key: bytes) -> bytes:
    return bytes(b ^ key[i % len(key)] for i, b in enumerate(data))


def encode_seed(ordered_cards: Iterable) -> str:
    """
    Encode an ordered card list into a seed.

    Accepts anything with `name` and `quantity` attributes (CardRef,
    SeedCard) or plain (name, quantity) pairs.
    """
    records = []
    for card in ordered_cards:
        if isinstance(card, tuple):
            name, quantity = card
        else:
            name, quantity = card.name, card.quantity
        records.append({"name": name, "quantity": quantity})

    payload = json.dumps(records, ensure_ascii=False, separators=(",", ":"))
    obfuscated = _xor(payload.encode("utf-8"), SEED_OBFUSCATION_KEY.encode("utf-8"))
    return base64.urlsafe_b64encode(obfuscated).decode("ascii").rstrip("=")


def decode_seed(seed: str) -> List[SeedCard]:
    """Exact inverse of encode_seed. Raises SeedFormatError on malformed input"""
    if not isinstance(seed, str):
        raise SeedFormatError(f"Seed must be a string, got {type(seed).__name__}")

    token = seed.strip()
    if not SEED_PATTERN.fullmatch(token):
        raise SeedFormatError("Invalid seed format: seeds use only URL-safe base64 characters")
    padded = token + "=" * (-len(token) % 4)
    try:
        obfuscated = base64.b64decode(padded, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as error:
        raise SeedFormatError(f"Invalid seed format: {error}") from error

    try:
        payload = _xor(obfuscated, SEED_OBFUSCATION_KEY.encode("utf-8")).decode("utf-8")
        records = json.loads(payload)
        return SEED_ADAPTER.validate_python(records)
    except (UnicodeDecodeError, json.JSONDecodeError, pydantic.ValidationError) as error:
        raise SeedFormatError(f"Invalid seed format: {error}") from error


def build_pool(
    source_cards: Sequence[CardRef],
    pack_size: int,
    rounds: int,
    rng: Optional[random.Random] = None,
) -> Tuple[List[CardRef], str]:
    """
    Shuffle the whole source list, keep the first 2 * pack_size * rounds
    cards and return them with their seed. Cards past that prefix are
    discarded and cannot be recovered from the seed.
    """
    pool_size = calculate_pool_size(pack_size, rounds)
    if len(source_cards) < pool_size:
        raise InsufficientCardsError(pool_size, len(source_cards))

    shuffled = list(source_cards)
    # random.shuffle is an unbiased Fisher-Yates shuffle
    (rng or random.Random()).shuffle(shuffled)
    pool = shuffled[:pool_size]

    seed = encode_seed(pool)
    logger.info(
        "Built pool of %d cards from %d source cards", len(pool), len(source_cards)
    )
    return pool, seed


def build_pool_from_seed(
    seed: str, resolve_names: NameResolver, pack_size: int, rounds: int
) -> List[CardRef]:
    """
    Rebuild a pool from a seed, keeping the decoded order.

    Names the resolver does not recognize are dropped, so a seed whose
    cards no longer resolve can come up short and raise
    InsufficientCardsError.
    """
    pool_size = calculate_pool_size(pack_size, rounds)
    entries = decode_seed(seed)
    if len(entries) < pool_size:
        raise InsufficientCardsError(pool_size, len(entries))

    names = list(dict.fromkeys(entry.name for entry in entries))
    metadata = resolve_names(names)

    cards = []
    for entry in entries:
        card = metadata.get(entry.name)
        if card is None:
            logger.warning("Card not found while rebuilding seed: %s", entry.name)
            continue
        cards.append(card.to_card_ref(entry.quantity))

    if len(cards) < pool_size:
        raise InsufficientCardsError(pool_size, len(cards))

    logger.info("Rebuilt pool of %d cards from seed", pool_size)
    return cards[:pool_size]
