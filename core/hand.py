"""Hand evaluation for blackjack."""

from core.cards import Card

Hand = tuple[Card, ...]

BLACKJACK = 21


def is_ace(card: Card) -> bool:
    return card.is_ace


def is_face(card: Card) -> bool:
    return card.is_face


def is_number(card: Card) -> bool:
    return not is_ace(card) and not is_face(card)


def calculate_hand_score(hand: Hand) -> int:
    """
    Calculate the blackjack value of a hand.

    Numeric cards count their pips and face cards count 10. Aces are then
    applied left to right: an ace counts 11 when that still leaves room for
    every later ace to count 1 without going over 21, and 1 otherwise.

    The result is not clamped, so a busted hand scores above 21.
    """
    numbers = [card for card in hand if is_number(card)]
    faces = [card for card in hand if is_face(card)]
    aces = [card for card in hand if is_ace(card)]

    score = sum(card.rank.pip_value for card in numbers) + 10 * len(faces)

    for index in range(len(aces)):
        # Each ace still to come is worth at least 1
        minimum_future_aces = len(aces) - (index + 1)
        if score + 11 + minimum_future_aces <= BLACKJACK:
            score += 11
        else:
            score += 1

    return score


def is_busted(hand: Hand) -> bool:
    """Check if the hand has busted (value > 21)."""
    return calculate_hand_score(hand) > BLACKJACK


def is_hand_blackjack(hand: Hand) -> bool:
    """
    Check if the hand is a blackjack.

    Only a two-card hand of one ace and one face card counts. An ace with a
    ten scores 21 but is not a blackjack.
    """
    if len(hand) != 2:
        return False

    first, second = hand
    return (is_ace(first) and is_face(second)) or (is_face(first) and is_ace(second))


def hand_to_str(hand: Hand) -> str:
    """Render a hand as e.g. ``A♠ K♥ (21)``."""
    cards_str = " ".join(str(card) for card in hand)
    if is_hand_blackjack(hand):
        return f"{cards_str} (BLACKJACK)"
    if is_busted(hand):
        return f"{cards_str} (BUST)"
    return f"{cards_str} ({calculate_hand_score(hand)})"
