"""Game API endpoints."""

import logging
import time
from fastapi import APIRouter, HTTPException, Header
from typing import Annotated, Any

from api.schemas import (
    ActionRequest,
    GameStateResponse,
    HandResponse,
    CardResponse,
)
from api.session import create_session, extract_session_id, get_session_store
from config import config
from core.cards import CARD_BACK_ASSET_KEY, Card, EmptyDeckError, Rank, Suit
from core.game import BlackjackTable, DealerPolicy, GameResult, GameState, Turn
from core.hand import Hand, calculate_hand_score, is_busted, is_hand_blackjack

logger = logging.getLogger(__name__)

router = APIRouter()

# In-memory table cache (for performance, backed by session store)
_tables: dict[str, BlackjackTable] = {}

# Session data keys
SESSION_KEY_GAME = "game"
SESSION_KEY_CREATED_AT = "created_at"
SESSION_KEY_LAST_ACTIVITY = "last_activity"


def _serialize_card(card: Card) -> dict[str, str]:
    """Serialize a card to a dict."""
    return {"rank": card.rank.value, "suit": card.suit.value}


def _deserialize_card(data: dict[str, str]) -> Card:
    """Deserialize a card from a dict."""
    return Card(Rank(data["rank"]), Suit(data["suit"]))


def _serialize_cards(cards: tuple[Card, ...]) -> list[dict[str, str]]:
    return [_serialize_card(c) for c in cards]


def _deserialize_cards(data: list[dict[str, str]]) -> tuple[Card, ...]:
    return tuple(_deserialize_card(c) for c in data)


def _serialize_game(table: BlackjackTable) -> dict[str, Any]:
    """Serialize the table's round for session storage."""
    state = table.state
    return {
        "turn": state.turn.value,
        "card_deck": _serialize_cards(state.card_deck),
        "player_hand": _serialize_cards(state.player_hand),
        "dealer_hand": _serialize_cards(state.dealer_hand),
        "dealer_policy": table.policy.value,
    }


def _deserialize_game(data: dict[str, Any]) -> BlackjackTable:
    """Restore a table from session data."""
    state = GameState(
        card_deck=_deserialize_cards(data["card_deck"]),
        player_hand=_deserialize_cards(data["player_hand"]),
        dealer_hand=_deserialize_cards(data["dealer_hand"]),
        turn=Turn(data["turn"]),
    )
    return BlackjackTable.restore(state, policy=DealerPolicy(data["dealer_policy"]))


def _new_table() -> BlackjackTable:
    return BlackjackTable(policy=config.game.dealer_policy)


def _require_session(session_id: str) -> None:
    """Reject session ids that were not issued here or have expired, dropping any cached table."""
    if extract_session_id(session_id) is None:
        _tables.pop(session_id, None)
        logger.warning("Rejected unsigned or expired session id")
        raise HTTPException(status_code=401, detail="Invalid session")


async def _load_game(session_id: str) -> BlackjackTable | None:
    """Load table from session store."""
    store = await get_session_store()
    session_data = await store.get(session_id)
    if session_data and SESSION_KEY_GAME in session_data:
        return _deserialize_game(session_data[SESSION_KEY_GAME])
    return None


async def _save_game(session_id: str, table: BlackjackTable) -> None:
    """Save table to session store."""
    store = await get_session_store()
    session_data = await store.get(session_id) or {}
    session_data[SESSION_KEY_GAME] = _serialize_game(table)
    session_data[SESSION_KEY_LAST_ACTIVITY] = int(time.time())
    if SESSION_KEY_CREATED_AT not in session_data:
        session_data[SESSION_KEY_CREATED_AT] = int(time.time())
    await store.set(session_id, session_data)


async def _get_game(session_id: str) -> BlackjackTable:
    """Get or create a table for the session."""
    _require_session(session_id)

    # Check memory cache first
    if session_id in _tables:
        return _tables[session_id]

    # Try to load from session store
    table = await _load_game(session_id)
    if table is not None:
        _tables[session_id] = table
        return table

    table = _new_table()
    _tables[session_id] = table
    await _save_game(session_id, table)
    return table


def _card_to_response(card: Card) -> CardResponse:
    return CardResponse(
        rank=card.rank.value,
        suit=card.suit.value,
        asset_key=card.asset_key,
    )


def _hand_to_response(hand: Hand, hide_first: bool = False) -> HandResponse:
    """Convert a hand to HandResponse, optionally keeping the first card face down."""
    if hide_first and hand:
        hidden = CardResponse(rank=None, suit=None, asset_key=CARD_BACK_ASSET_KEY, hidden=True)
        return HandResponse(
            cards=[hidden] + [_card_to_response(c) for c in hand[1:]],
            score=None,
            is_blackjack=None,
            is_busted=None,
        )

    return HandResponse(
        cards=[_card_to_response(c) for c in hand],
        score=calculate_hand_score(hand),
        is_blackjack=is_hand_blackjack(hand),
        is_busted=is_busted(hand),
    )


def _game_state_response(table: BlackjackTable) -> GameStateResponse:
    """Convert the table's round to a response."""
    state = table.state
    player_turn = table.turn == Turn.PLAYER_TURN
    result = table.result

    return GameStateResponse(
        turn=table.turn.value,
        player_hand=_hand_to_response(state.player_hand),
        dealer_hand=_hand_to_response(state.dealer_hand, hide_first=player_turn),
        cards_remaining=state.cards_remaining,
        can_hit=table.can_hit,
        can_stand=table.can_stand,
        result=None if result == GameResult.NO_RESULT else result.value,
    )


@router.post("/new")
async def new_game(
    session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> dict[str, str]:
    """Create a new game session."""
    if session_id is None:
        session_id = await create_session()
    else:
        _require_session(session_id)

    table = _new_table()
    _tables[session_id] = table
    await _save_game(session_id, table)
    logger.info("New game for session %s", session_id[:8])

    return {"session_id": session_id}


@router.get("/state")
async def get_state(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Get current game state."""
    table = await _get_game(session_id)
    return _game_state_response(table)


@router.post("/action")
async def player_action(
    request: ActionRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Execute a player action."""
    table = await _get_game(session_id)

    actions = {
        "hit": table.hit,
        "stand": table.stand,
    }

    try:
        accepted = actions[request.action]()
    except EmptyDeckError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not accepted:
        raise HTTPException(status_code=400, detail=f"Cannot {request.action} now")

    await _save_game(session_id, table)
    return _game_state_response(table)


@router.post("/reset")
async def reset_game(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Deal a fresh round in the same session."""
    table = await _get_game(session_id)
    table.reset()
    await _save_game(session_id, table)
    return _game_state_response(table)
