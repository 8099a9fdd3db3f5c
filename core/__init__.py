"""Core blackjack engine - 100% UI-agnostic."""

from core.cards import Card, Deck, EmptyDeckError, Rank, Suit, new_deck, shuffle, take_card
from core.hand import Hand, calculate_hand_score, is_hand_blackjack

__all__ = [
    "Card",
    "Deck",
    "EmptyDeckError",
    "Rank",
    "Suit",
    "new_deck",
    "shuffle",
    "take_card",
    "Hand",
    "calculate_hand_score",
    "is_hand_blackjack",
]
