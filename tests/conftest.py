"""Pytest fixtures for blackjack table tests."""

import pytest
from random import Random

from hypothesis import strategies as st

from core.cards import Card, Rank, Suit, new_deck
from core.game import BlackjackTable, GameState, Turn


def hand(*cards: str) -> tuple[Card, ...]:
    """Build a hand from card strings like 'AS', 'KH', '10D'."""
    return tuple(Card.from_string(c) for c in cards)


def state_with(player: tuple[Card, ...], dealer: tuple[Card, ...], top: tuple[Card, ...] = ()) -> GameState:
    """
    Build a round holding the given hands.

    ``top`` lists cards in draw order; the rest of the 52-card deck sits
    beneath them so the round stays complete.
    """
    used = set(player) | set(dealer) | set(top)
    rest = tuple(c for c in new_deck() if c not in used)
    return GameState(
        card_deck=rest + tuple(reversed(top)),
        player_hand=player,
        dealer_hand=dealer,
        turn=Turn.PLAYER_TURN,
    )


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def table(rng):
    """A table dealt from a seeded deck."""
    return BlackjackTable(rng=rng)


@pytest.fixture
def blackjack_hand():
    """A blackjack hand (ace and king)."""
    return hand("AS", "KH")


@pytest.fixture
def ace_ten_hand():
    """21 with ace and ten, which is not a blackjack."""
    return hand("TS", "AH")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return hand("TS", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return hand("TS", "6H", "KC")


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)


@st.composite
def hand_strategy(draw, min_cards=0, max_cards=6):
    """Generate a random hand."""
    return tuple(draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards)))
