"""Card and deck primitives - immutable card representations."""

import logging
from dataclasses import dataclass
from enum import Enum
from random import Random

logger = logging.getLogger(__name__)


class EmptyDeckError(IndexError):
    """Raised when a card is drawn from a deck with no cards left."""

    def __init__(self) -> None:
        super().__init__("attempted draw with 0 cards remaining")


class Suit(Enum):
    """Card suits."""

    CLUBS = "clubs"
    DIAMONDS = "diamonds"
    HEARTS = "hearts"
    SPADES = "spades"

    def __str__(self) -> str:
        symbols = {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }
        return symbols[self]

    @property
    def singular(self) -> str:
        """Return the singular suit name ('spades' -> 'spade')."""
        return self.value[:-1]


class Rank(Enum):
    """Card ranks. Numeric ranks carry their pip value."""

    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "jack"
    QUEEN = "queen"
    KING = "king"
    ACE = "ace"

    def __str__(self) -> str:
        if self.is_number:
            return self.value
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE

    @property
    def is_face(self) -> bool:
        """Check if this rank is a face card (jack, queen or king)."""
        return self in (Rank.JACK, Rank.QUEEN, Rank.KING)

    @property
    def is_number(self) -> bool:
        """Check if this rank is a numeric card (2 through 10)."""
        return not self.is_ace and not self.is_face

    @property
    def pip_value(self) -> int:
        """Return the face value of a numeric rank."""
        if not self.is_number:
            raise ValueError(f"{self.name} has no pip value")
        return int(self.value)


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def is_face(self) -> bool:
        """Check if this card is a jack, queen or king."""
        return self.rank.is_face

    @property
    def is_number(self) -> bool:
        """Check if this card is a numeric card."""
        return self.rank.is_number

    @property
    def asset_key(self) -> str:
        """
        Return the image identifier for this card's face.

        Built as ``<suit>_<rank>`` with the singular suit name and the ace
        written as 1, e.g. ``spade_1``, ``heart_jack``, ``club_10``.
        """
        rank = "1" if self.is_ace else self.rank.value
        return f"{self.suit.singular}_{rank}"

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {
            "2": Rank.TWO,
            "3": Rank.THREE,
            "4": Rank.FOUR,
            "5": Rank.FIVE,
            "6": Rank.SIX,
            "7": Rank.SEVEN,
            "8": Rank.EIGHT,
            "9": Rank.NINE,
            "10": Rank.TEN,
            "T": Rank.TEN,
            "J": Rank.JACK,
            "Q": Rank.QUEEN,
            "K": Rank.KING,
            "A": Rank.ACE,
        }

        suit_map = {
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


# Asset key for the face-down card image
CARD_BACK_ASSET_KEY = "back"

# A deck is a stack; the top card is the last element.
Deck = tuple[Card, ...]


def new_deck() -> Deck:
    """Return all 52 cards, suit-major and rank-minor."""
    return tuple(Card(rank, suit) for suit in Suit for rank in Rank)


def shuffle(deck: Deck, rng: Random | None = None) -> Deck:
    """
    Return a shuffled copy of the deck.

    Args:
        deck: Cards to permute (left untouched)
        rng: Random number generator for reproducible shuffles

    Returns:
        A new deck holding the same cards in random order
    """
    rng = rng or Random()
    cards = list(deck)
    rng.shuffle(cards)
    return tuple(cards)


def take_card(deck: Deck) -> tuple[Card, Deck]:
    """Draw the top card, returning it with the remaining deck."""
    if not deck:
        raise EmptyDeckError()
    card = deck[-1]
    logger.debug("Drew %s, %d cards remaining", card, len(deck) - 1)
    return card, deck[:-1]
