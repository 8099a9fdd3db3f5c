"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict
from typing import Literal


class ActionRequest(BaseModel):
    """Request for player action."""

    action: Literal["hit", "stand"]


class CardResponse(BaseModel):
    """Card representation. Hidden cards carry no rank or suit."""

    model_config = ConfigDict(from_attributes=True)

    rank: str | None
    suit: str | None
    asset_key: str
    hidden: bool = False


class HandResponse(BaseModel):
    """Hand representation. ``score`` is None while a card is hidden."""

    cards: list[CardResponse]
    score: int | None
    is_blackjack: bool | None
    is_busted: bool | None


class GameStateResponse(BaseModel):
    """Current round as the player may see it."""

    turn: Literal["player_turn", "dealer_turn"]
    player_hand: HandResponse
    dealer_hand: HandResponse
    cards_remaining: int
    can_hit: bool
    can_stand: bool
    result: Literal["player_win", "dealer_win", "draw"] | None
