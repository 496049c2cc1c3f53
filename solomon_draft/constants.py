from enum import Enum

APPLICATION_NAME = "Solomon_Draft"
APPLICATION_VERSION = 1.0

CARD_COLOR_SYMBOL_WHITE = "W"
CARD_COLOR_SYMBOL_BLUE = "U"
CARD_COLOR_SYMBOL_BLACK = "B"
CARD_COLOR_SYMBOL_RED = "R"
CARD_COLOR_SYMBOL_GREEN = "G"

CARD_COLORS = [
    CARD_COLOR_SYMBOL_WHITE,
    CARD_COLOR_SYMBOL_BLUE,
    CARD_COLOR_SYMBOL_BLACK,
    CARD_COLOR_SYMBOL_RED,
    CARD_COLOR_SYMBOL_GREEN,
]


class Color(str, Enum):
    """The five colors a card's color identity can contain"""

    WHITE = CARD_COLOR_SYMBOL_WHITE
    BLUE = CARD_COLOR_SYMBOL_BLUE
    BLACK = CARD_COLOR_SYMBOL_BLACK
    RED = CARD_COLOR_SYMBOL_RED
    GREEN = CARD_COLOR_SYMBOL_GREEN


class ColorBucket(str, Enum):
    """Collection buckets. Every card is filed under exactly one"""

    WHITE = CARD_COLOR_SYMBOL_WHITE
    BLUE = CARD_COLOR_SYMBOL_BLUE
    BLACK = CARD_COLOR_SYMBOL_BLACK
    RED = CARD_COLOR_SYMBOL_RED
    GREEN = CARD_COLOR_SYMBOL_GREEN
    COLORLESS = "Colorless"
    MULTICOLOR = "Multicolor"


class Seat(str, Enum):
    P1 = "P1"
    P2 = "P2"


class Phase(str, Enum):
    P1_SPLIT = "P1-split"
    P2_CHOOSE = "P2-choose"
    P2_SPLIT = "P2-split"
    P1_CHOOSE = "P1-choose"


class ActionType(str, Enum):
    """History entry types"""

    PACK_DEALT = "pack-dealt"
    PACK_SPLIT = "pack-split"
    PILE_CHOSEN = "pile-chosen"


class DraftActionType(str, Enum):
    """Actions a caller can submit to the engine"""

    DEAL_PACK = "deal-pack"
    SPLIT_PACK = "split-pack"
    CHOOSE_PILE = "choose-pile"


# One round visits the phases in this order
PHASE_CYCLE = [
    Phase.P1_SPLIT,
    Phase.P2_CHOOSE,
    Phase.P2_SPLIT,
    Phase.P1_CHOOSE,
]

SPLIT_PHASES = (Phase.P1_SPLIT, Phase.P2_SPLIT)
CHOOSE_PHASES = (Phase.P1_CHOOSE, Phase.P2_CHOOSE)

PACKS_PER_ROUND = 2

DRAFT_PACK_SIZE_DEFAULT = 6
DRAFT_PACK_SIZE_MIN = 1
DRAFT_PACK_SIZE_MAX = 20
DRAFT_ROUNDS_DEFAULT = 15
DRAFT_ROUNDS_MIN = 1
DRAFT_ROUNDS_MAX = 50

# Seed obfuscation key. This only makes the seed unreadable at a glance, it is not a security mechanism
SEED_OBFUSCATION_KEY = "SolomonDraft2024!@#"

URL_SCRYFALL_API = "https://api.scryfall.com"
SCRYFALL_COLLECTION_ENDPOINT = "/cards/collection"
SCRYFALL_SEARCH_ENDPOINT = "/cards/search"
SCRYFALL_CARD_ENDPOINT = "/cards/"
SCRYFALL_COLLECTION_BATCH_SIZE = 75
SCRYFALL_REQUESTS_PER_SECOND = 10
SCRYFALL_BURST = 10
SCRYFALL_MAX_THROTTLE_RETRIES = 5
SCRYFALL_RETRY_AFTER_DEFAULT = 1.0
REQUEST_TIMEOUT = 15

URL_MOXFIELD_API = "https://api.moxfield.com/v2/decks/"
URL_CUBECOBRA_LIST_API = "https://cubecobra.com/cube/api/cubelist/"
DECK_SOURCE_MOXFIELD = "moxfield"
DECK_SOURCE_CUBECOBRA = "cubecobra"
DECK_SOURCE_RAW_TEXT = "raw-text"

USER_AGENT = f"SolomonDraft/{APPLICATION_VERSION}"
API_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "application/json;q=0.9,*/*;q=0.8",
}

EXPORT_P1_HEADER = "Player 1 Deck List:"
EXPORT_P2_HEADER = "Player 2 Deck List:"
EXPORT_P1_FILE_NAME = "player1-decklist.txt"
EXPORT_P2_FILE_NAME = "player2-decklist.txt"
EXPORT_COMBINED_FILE_NAME = "draft-results.txt"
