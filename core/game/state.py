"""Game state values: turns, results and the round snapshot."""

from dataclasses import dataclass, replace
from enum import Enum

from core.cards import Card, Deck
from core.hand import Hand, calculate_hand_score


class Turn(Enum):
    """
    Whose action is currently permitted.

    Flow: PLAYER_TURN → DEALER_TURN. A new round is the only way back.
    """

    PLAYER_TURN = "player_turn"
    DEALER_TURN = "dealer_turn"

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


class GameResult(Enum):
    """Outcome of comparing the player's and dealer's hands."""

    PLAYER_WIN = "player_win"
    DEALER_WIN = "dealer_win"
    DRAW = "draw"
    NO_RESULT = "no_result"

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


class DealerPolicy(Enum):
    """How the dealer plays once the player stands."""

    # At most one draw per stand
    SINGLE_DRAW = "single_draw"
    # Keep drawing until the dealer is above the stand threshold
    DRAW_TO_17 = "draw_to_17"


@dataclass(frozen=True)
class GameState:
    """
    Immutable snapshot of a round.

    Engine functions never modify a GameState; they return a new one.
    """

    card_deck: Deck
    player_hand: Hand
    dealer_hand: Hand
    turn: Turn = Turn.PLAYER_TURN

    @property
    def player_score(self) -> int:
        return calculate_hand_score(self.player_hand)

    @property
    def dealer_score(self) -> int:
        return calculate_hand_score(self.dealer_hand)

    @property
    def cards_remaining(self) -> int:
        return len(self.card_deck)

    @property
    def all_cards(self) -> tuple[Card, ...]:
        """Every card of the round, wherever it currently sits."""
        return self.card_deck + self.player_hand + self.dealer_hand

    def evolve(self, **changes) -> "GameState":
        """Return a copy of this state with the given fields replaced."""
        return replace(self, **changes)
