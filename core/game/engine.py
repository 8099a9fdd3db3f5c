"""Blackjack turn engine and the table that drives it."""

import logging
from random import Random
from typing import Callable

from transitions import Machine

from core.cards import new_deck, shuffle, take_card
from core.hand import Hand, calculate_hand_score, hand_to_str, is_busted, is_hand_blackjack
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.state import DealerPolicy, GameResult, GameState, Turn

logger = logging.getLogger(__name__)

# The dealer stands on any score above this
DEALER_STANDS_ABOVE = 16


def setup_game(rng: Random | None = None) -> GameState:
    """
    Deal a fresh round from a newly shuffled deck.

    The top two cards go to the player, the next two to the dealer and the
    remaining 48 stay in the deck.

    Args:
        rng: Random number generator for reproducible rounds
    """
    card_deck = shuffle(new_deck(), rng)
    state = GameState(
        card_deck=card_deck[:-4],
        player_hand=card_deck[-2:],
        dealer_hand=card_deck[-4:-2],
        turn=Turn.PLAYER_TURN,
    )
    logger.debug(
        "New round: player %s, dealer %s",
        hand_to_str(state.player_hand),
        hand_to_str(state.dealer_hand),
    )
    return state


def player_hits(state: GameState) -> GameState:
    """Draw one card into the player's hand. The turn does not change."""
    card, remaining = take_card(state.card_deck)
    return state.evolve(
        card_deck=remaining,
        player_hand=state.player_hand + (card,),
    )


def _dealer_draws(state: GameState) -> GameState:
    card, remaining = take_card(state.card_deck)
    return state.evolve(
        card_deck=remaining,
        dealer_hand=state.dealer_hand + (card,),
    )


def player_stands(
    state: GameState,
    policy: DealerPolicy = DealerPolicy.SINGLE_DRAW,
) -> GameState:
    """
    End the player's turn and let the dealer play.

    With ``SINGLE_DRAW`` the dealer takes at most one card: none when already
    above 16, otherwise exactly one, whatever it brings the score to. With
    ``DRAW_TO_17`` the dealer keeps drawing until above 16.

    Args:
        state: Current round
        policy: Dealer play variant

    Returns:
        The round with the turn handed to the dealer
    """
    if policy == DealerPolicy.DRAW_TO_17:
        while calculate_hand_score(state.dealer_hand) <= DEALER_STANDS_ABOVE:
            state = _dealer_draws(state)
    elif calculate_hand_score(state.dealer_hand) <= DEALER_STANDS_ABOVE:
        state = _dealer_draws(state)

    logger.debug("Dealer finishes on %s", hand_to_str(state.dealer_hand))
    return state.evolve(turn=Turn.DEALER_TURN)


def determine_game_result(state: GameState) -> GameResult:
    """
    Compare the player's and dealer's hands.

    Checked in order: blackjacks, equal scores, player bust, dealer bust,
    then the higher score. Equal scores draw even when both hands are bust.
    Pure; callers decide when the result is meaningful.
    """
    player_score = calculate_hand_score(state.player_hand)
    dealer_score = calculate_hand_score(state.dealer_hand)

    player_bj = is_hand_blackjack(state.player_hand)
    dealer_bj = is_hand_blackjack(state.dealer_hand)

    if player_bj and dealer_bj:
        return GameResult.DRAW
    if player_bj:
        return GameResult.PLAYER_WIN
    if dealer_bj:
        return GameResult.DEALER_WIN

    if player_score == dealer_score:
        return GameResult.DRAW

    # Player busts first, so a double bust goes to the dealer
    if player_score > 21:
        return GameResult.DEALER_WIN
    if dealer_score > 21:
        return GameResult.PLAYER_WIN

    if dealer_score > player_score:
        return GameResult.DEALER_WIN
    if player_score > dealer_score:
        return GameResult.PLAYER_WIN

    return GameResult.NO_RESULT


class BlackjackTable:
    """
    Holds the current round for a presentation layer.

    Actions are guarded by a state machine mirroring ``Turn``: hit and stand
    are only accepted on the player's turn, reset is always accepted. Each
    accepted action swaps in the new ``GameState`` returned by the engine.
    Communication happens through events and return values only.
    """

    # State machine states
    STATES = [t.value for t in Turn]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "player_action", "source": "player_turn", "dest": "player_turn"},
        {"trigger": "player_done", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "reset_round", "source": "*", "dest": "player_turn"},
    ]

    def __init__(
        self,
        rng: Random | None = None,
        policy: DealerPolicy = DealerPolicy.SINGLE_DRAW,
        state: GameState | None = None,
    ) -> None:
        """
        Initialize a table.

        Args:
            rng: Random number generator for reproducible rounds
            policy: Dealer play variant used on stand
            state: Round to resume instead of dealing a new one
        """
        self._rng = rng or Random()
        self.policy = policy
        self.events = EventEmitter()
        self._state = state or setup_game(self._rng)

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial=self._state.turn.value,
            auto_transitions=False,
            model_attribute="_machine_state",
        )

        if state is None:
            self._emit_round_started()

    @classmethod
    def restore(
        cls,
        state: GameState,
        policy: DealerPolicy = DealerPolicy.SINGLE_DRAW,
        rng: Random | None = None,
    ) -> "BlackjackTable":
        """Rebuild a table around a saved round."""
        return cls(rng=rng, policy=policy, state=state)

    @property
    def state(self) -> GameState:
        """The current round snapshot."""
        return self._state

    @property
    def turn(self) -> Turn:
        return Turn(self._machine_state)  # type: ignore[attr-defined]

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to table events."""
        self.events.subscribe(handler, event_type)

    def reset(self) -> GameState:
        """Discard the current round and its event history, then deal a new one."""
        self._state = setup_game(self._rng)
        self.reset_round()
        self.events.clear_history()
        self._emit_round_started()
        return self._state

    def hit(self) -> bool:
        """Player hits (takes another card)."""
        if not self.can_hit:
            self._reject("hit")
            return False

        self._state = player_hits(self._state)
        self._emit_dealt(self._state.player_hand, "player")
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=self._state.player_score)

        if is_busted(self._state.player_hand):
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=self._state.player_score)

        self.player_action()  # Stay in player turn
        return True

    def stand(self) -> bool:
        """Player stands and the dealer plays."""
        if not self.can_stand:
            self._reject("stand")
            return False

        dealt_before = len(self._state.dealer_hand)
        self._state = player_stands(self._state, self.policy)
        self.player_done()
        self.events.emit_new(EventType.PLAYER_STAND, hand_value=self._state.player_score)

        for card in self._state.dealer_hand[dealt_before:]:
            self.events.emit_new(EventType.CARD_DEALT, card=str(card), hand="dealer")
            self.events.emit_new(EventType.DEALER_HITS, card=str(card))
        self.events.emit_new(EventType.DEALER_STANDS, hand_value=self._state.dealer_score)

        self.events.emit_new(
            EventType.ROUND_ENDED,
            result=self.result.value,
            player_score=self._state.player_score,
            dealer_score=self._state.dealer_score,
        )
        return True

    def _emit_round_started(self) -> None:
        self.events.emit_new(
            EventType.ROUND_STARTED,
            player_hand=hand_to_str(self._state.player_hand),
            cards_remaining=self._state.cards_remaining,
        )

    def _emit_dealt(self, hand: Hand, owner: str) -> None:
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(hand[-1]),
            hand=owner,
            hand_value=calculate_hand_score(hand),
        )

    def _reject(self, action: str) -> None:
        logger.warning("Rejected %s during %s", action, self.turn.value)
        self.events.emit_new(
            EventType.INVALID_ACTION,
            message=f"Cannot {action} now",
            turn=self.turn.value,
        )

    @property
    def result(self) -> GameResult:
        """The round outcome, or NO_RESULT while the player is still acting."""
        if self.turn == Turn.PLAYER_TURN:
            return GameResult.NO_RESULT
        return determine_game_result(self._state)

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return self.turn == Turn.PLAYER_TURN

    @property
    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self.turn == Turn.PLAYER_TURN
