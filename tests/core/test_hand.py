"""Tests for hand scoring and blackjack detection."""

from hypothesis import given

from conftest import hand, hand_strategy
from core.hand import (
    calculate_hand_score,
    hand_to_str,
    is_busted,
    is_hand_blackjack,
)


class TestHandScore:
    """Tests for calculate_hand_score."""

    def test_empty_hand(self):
        """Test an empty hand scores zero."""
        assert calculate_hand_score(()) == 0

    def test_number_cards(self, hard_16_hand):
        """Test numeric cards count their pips."""
        assert calculate_hand_score(hard_16_hand) == 16
        assert calculate_hand_score(hand("2C", "3D", "4H")) == 9

    def test_face_cards_count_ten(self):
        """Test jack, queen and king are worth 10."""
        assert calculate_hand_score(hand("JS", "QH")) == 20
        assert calculate_hand_score(hand("KC", "5D")) == 15

    def test_ace_king(self, blackjack_hand):
        """Test a lone ace counts 11 when safe."""
        assert calculate_hand_score(blackjack_hand) == 21

    def test_two_aces(self):
        """Test A-A = 12 (11 + 1)."""
        assert calculate_hand_score(hand("AS", "AH")) == 12

    def test_three_aces(self):
        """Test A-A-A = 13 (11 + 1 + 1)."""
        assert calculate_hand_score(hand("AS", "AH", "AD")) == 13

    def test_ace_goes_hard(self):
        """Test an ace drops to 1 when 11 would bust."""
        assert calculate_hand_score(hand("AS", "5H", "8C")) == 14
        assert calculate_hand_score(hand("KS", "QH", "AC")) == 21

    def test_ace_reserves_room_for_later_aces(self):
        """Test 8 + A + A: the first ace is 11 because 8 + 11 + 1 = 20."""
        assert calculate_hand_score(hand("8S", "AH", "AC")) == 20

    def test_first_ace_hard_when_later_aces_need_room(self):
        """Test 9 + A + A: 9 + 11 + 1 = 21 still fits."""
        assert calculate_hand_score(hand("9S", "AH", "AC")) == 21
        # 10 + A + A: 10 + 11 + 1 = 22, so both aces count 1
        assert calculate_hand_score(hand("TS", "AH", "AC")) == 12

    def test_bust_not_clamped(self, bust_hand):
        """Test a busted hand reports its full total."""
        assert calculate_hand_score(bust_hand) == 26
        assert is_busted(bust_hand)

    def test_score_independent_of_ace_position(self):
        """Test aces are applied after numbers and faces wherever they sit."""
        assert calculate_hand_score(hand("AS", "9H", "5C")) == 15
        assert calculate_hand_score(hand("9H", "5C", "AS")) == 15

    @given(hand_strategy())
    def test_scoring_is_pure(self, cards):
        """Test scoring the same hand twice gives the same value."""
        assert calculate_hand_score(cards) == calculate_hand_score(cards)

    @given(hand_strategy(min_cards=1))
    def test_aces_never_cause_avoidable_bust(self, cards):
        """Test aces only count 11 when the hand stays at or below 21."""
        score = calculate_hand_score(cards)
        all_aces_low = sum(
            1 if c.is_ace else 10 if c.is_face else c.rank.pip_value for c in cards
        )
        assert score >= all_aces_low
        if all_aces_low <= 21:
            assert score <= 21
        else:
            assert score == all_aces_low


class TestBlackjack:
    """Tests for is_hand_blackjack."""

    def test_ace_face_is_blackjack(self, blackjack_hand):
        """Test ace with king in either order."""
        assert is_hand_blackjack(blackjack_hand)
        assert is_hand_blackjack(hand("QD", "AC"))
        assert is_hand_blackjack(hand("AH", "JS"))

    def test_ace_ten_is_not_blackjack(self, ace_ten_hand):
        """Test a ten is numeric, not a face card."""
        assert calculate_hand_score(ace_ten_hand) == 21
        assert not is_hand_blackjack(ace_ten_hand)

    def test_three_cards_not_blackjack(self):
        """Test a third card rules out blackjack."""
        assert not is_hand_blackjack(hand("AS", "KH", "2D"))
        assert not is_hand_blackjack(hand("7S", "7H", "7C"))

    def test_other_pairs_not_blackjack(self):
        """Test two aces or two faces are not blackjack."""
        assert not is_hand_blackjack(hand("AS", "AH"))
        assert not is_hand_blackjack(hand("KS", "QH"))
        assert not is_hand_blackjack(())


class TestHandStr:
    """Tests for hand rendering."""

    def test_hand_to_str(self, hard_16_hand, blackjack_hand, bust_hand):
        assert hand_to_str(hard_16_hand) == "10♠ 6♥ (16)"
        assert hand_to_str(blackjack_hand).endswith("(BLACKJACK)")
        assert hand_to_str(bust_hand).endswith("(BUST)")
