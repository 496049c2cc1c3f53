"""
solomon_draft/errors.py
Exception taxonomy for the draft core and its collaborators.
"""


class DraftError(Exception):
    """Base class for every error raised by this package"""


class InsufficientCardsError(DraftError):
    """The card list is smaller than 2 * pack_size * rounds"""

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Not enough cards in deck list. Need at least {required}, got {available}"
        )


class ValidationError(DraftError):
    """A split was malformed"""


class InvalidStateError(DraftError):
    """An action was submitted in a phase that does not permit it"""


class NotFoundError(DraftError):
    """A pile id did not match either pile of the active pack"""


class SeedFormatError(DraftError):
    """A seed string could not be decoded"""


class CatalogLookupError(DraftError):
    """The card catalog rejected a lookup"""


class CatalogThrottledError(CatalogLookupError):
    """The card catalog kept throttling past the retry ceiling"""


class DeckListError(DraftError):
    """A deck list could not be retrieved or parsed"""


class NetworkError(DraftError):
    """A collaborator request failed at the transport level"""
