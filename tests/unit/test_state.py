"""游戏状态测试"""
import random

import pytest

from core.cards import DECK_SIZE, str_to_cards
from core.actions import PlayType, RequiredKind
from core.rules import RejectionReason
from core.state import (
    Player,
    PLAYERS,
    RoundPhase,
    RoundState,
    IllegalPlayError,
    GameState,
)


def cards(s: str):
    return str_to_cards(s)


class TestPlayer:
    """Player 测试"""

    def test_opponent(self):
        assert Player.HUMAN.opponent == Player.COMPUTER
        assert Player.COMPUTER.opponent == Player.HUMAN

    def test_display_name(self):
        assert Player.HUMAN.display_name == "Player"
        assert Player.COMPUTER.display_name == "Computer"

    def test_seat_order(self):
        assert PLAYERS == (Player.HUMAN, Player.COMPUTER)


class TestRoundState:
    """RoundState 测试"""

    def test_constructors(self):
        assert RoundState.awaiting_first_play().phase == RoundPhase.AWAITING_FIRST_PLAY
        assert RoundState.awaiting_follow(RequiredKind.PAIR).required_kind == RequiredKind.PAIR
        assert RoundState.round_open().required_kind is None
        assert RoundState.game_over(Player.HUMAN).winner == Player.HUMAN

    def test_follow_requires_kind(self):
        with pytest.raises(ValueError):
            RoundState(RoundPhase.AWAITING_FOLLOW)

    def test_open_round_has_no_kind(self):
        with pytest.raises(ValueError):
            RoundState(RoundPhase.ROUND_OPEN, required_kind=RequiredKind.SINGLE)

    def test_winner_only_when_over(self):
        with pytest.raises(ValueError):
            RoundState(RoundPhase.ROUND_OPEN, winner=Player.HUMAN)
        with pytest.raises(ValueError):
            RoundState(RoundPhase.GAME_OVER)


class TestInitialState:
    """初始状态测试"""

    @pytest.mark.parametrize("hand_size", [7, 8, 9, 10])
    def test_partition(self, hand_size):
        state = GameState.initial(hand_size=hand_size, seed=hand_size)
        assert state.card_count(Player.HUMAN) == hand_size
        assert state.card_count(Player.COMPUTER) == hand_size
        assert state.deck_count == DECK_SIZE - 2 * hand_size
        ids = [c.id for c in state.all_cards()]
        assert sorted(ids) == list(range(DECK_SIZE))

    def test_starts_awaiting_first_play(self):
        state = GameState.initial(seed=1)
        assert state.phase == RoundPhase.AWAITING_FIRST_PLAY
        assert state.table == ()
        assert state.winner is None
        assert state.incumbent() is None

    def test_seeded_deal_is_reproducible(self):
        assert GameState.initial(seed=5) == GameState.initial(seed=5)

    def test_first_player_override(self):
        state = GameState.initial(seed=1, first_player=Player.COMPUTER)
        assert state.current_player == Player.COMPUTER

    def test_first_player_is_random(self):
        firsts = {GameState.initial(rng=random.Random(i)).current_player for i in range(40)}
        assert firsts == {Player.HUMAN, Player.COMPUTER}

    def test_hands_sorted(self):
        state = GameState.initial(seed=3)
        hand = state.get_hand(Player.HUMAN)
        assert list(hand) == sorted(hand, key=lambda c: c.sort_key)


class TestWithPlay:
    """出牌转换测试"""

    def setup_method(self):
        self.state = GameState.from_hands(
            human=cards("5D 9C JH"),
            computer=cards("4S 6H KD"),
        )

    def test_play_sets_follow_constraint(self):
        new_state = self.state.with_play(cards("5D"))
        assert new_state.phase == RoundPhase.AWAITING_FOLLOW
        assert new_state.required_kind == RequiredKind.SINGLE
        assert new_state.current_player == Player.COMPUTER
        assert [str(c) for c in new_state.table] == ["5♦"]
        assert new_state.card_count(Player.HUMAN) == 2
        assert new_state.incumbent().play_type == PlayType.SINGLE

    def test_original_state_untouched(self):
        self.state.with_play(cards("5D"))
        assert self.state.card_count(Player.HUMAN) == 3
        assert self.state.table == ()

    def test_illegal_play_raises(self):
        state = self.state.with_play(cards("5D"))
        with pytest.raises(IllegalPlayError) as exc_info:
            state.with_play(cards("4S"))
        assert exc_info.value.reason == RejectionReason.DOES_NOT_BEAT

    def test_not_your_turn(self):
        _, reason = self.state.validate_play(cards("4S"), Player.COMPUTER)
        assert reason == RejectionReason.NOT_YOUR_TURN

    def test_cards_not_in_hand(self):
        _, reason = self.state.validate_play(cards("4S"), Player.HUMAN)
        assert reason == RejectionReason.CARDS_NOT_IN_HAND

    def test_winning_play_ends_game(self):
        state = GameState.from_hands(human=cards("9C"), computer=cards("4S 6H"))
        final = state.with_play(cards("9C"))
        assert final.is_finished
        assert final.winner == Player.HUMAN
        assert final.required_kind is None

    def test_no_moves_after_game_over(self):
        state = GameState.from_hands(human=cards("9C"), computer=cards("4S 6H"))
        final = state.with_play(cards("9C"))
        _, reason = final.validate_play(cards("4S"), Player.COMPUTER)
        assert reason == RejectionReason.GAME_OVER
        with pytest.raises(IllegalPlayError):
            final.with_draw(Player.COMPUTER)

    def test_history_and_steps(self):
        state = self.state.with_play(cards("5D")).with_play(cards("6H"))
        assert state.step_count == 2
        assert [p for p, _ in state.play_history] == [Player.HUMAN, Player.COMPUTER]


class TestWithDraw:
    """摸牌转换测试"""

    def test_draw_takes_deck_tail(self):
        state = GameState.from_hands(
            human=cards("5D"), computer=cards("4S"), deck=cards("2S 3S"),
        )
        new_state = state.with_draw()
        assert new_state.deck_count == 1
        assert [str(c) for c in new_state.get_hand(Player.HUMAN)] == ["3♠", "5♦"]
        assert new_state.current_player == Player.COMPUTER
        assert new_state.phase == RoundPhase.ROUND_OPEN
        assert new_state.play_history[-1] == (Player.HUMAN, ())

    def test_draw_clears_constraint(self):
        state = GameState.from_hands(
            human=cards("3D 8S 8H 9C"), computer=cards("KH 4C"), deck=cards("2S"),
        )
        state = state.with_play(cards("3D"))
        state = state.with_draw(Player.COMPUTER)
        assert state.required_kind is None
        assert state.incumbent() is None
        # 约束解除后可以出任意牌型
        assert state.with_play(cards("8S 8H")).required_kind == RequiredKind.PAIR

    def test_empty_deck_is_pass(self):
        state = GameState.from_hands(human=cards("5D"), computer=cards("4S"))
        new_state = state.with_draw()
        assert new_state.card_count(Player.HUMAN) == 1
        assert new_state.current_player == Player.COMPUTER
        assert new_state.phase == RoundPhase.ROUND_OPEN

    def test_first_play_rule_survives_draw(self):
        state = GameState.from_hands(
            human=cards("5D"), computer=cards("9S 9H"), deck=cards("2S"),
        )
        state = state.with_draw()
        _, reason = state.validate_play(cards("9S 9H"), Player.COMPUTER)
        assert reason == RejectionReason.KIND_MISMATCH

    def test_wrong_player_draw(self):
        state = GameState.from_hands(human=cards("5D"), computer=cards("4S"))
        with pytest.raises(IllegalPlayError):
            state.with_draw(Player.COMPUTER)


class TestLegalPlays:
    """合法出牌测试"""

    def test_first_play_singles_only(self):
        state = GameState.from_hands(human=cards("5D 5H"), computer=cards("4S"))
        plays = state.get_legal_plays()
        assert {p.play_type for p in plays} == {PlayType.SINGLE}

    def test_follow_must_beat(self):
        state = GameState.from_hands(human=cards("5D 7S"), computer=cards("4S 6H 3C"))
        state = state.with_play(cards("5D"))
        plays = state.get_legal_plays()
        assert [str(p) for p in plays] == ["6♥"]

    def test_open_round_all_kinds(self):
        state = GameState.from_hands(
            human=cards("5D 5H 2C"), computer=cards("4S"), table=cards("3S"),
        )
        assert state.phase == RoundPhase.ROUND_OPEN
        kinds = {p.play_type for p in state.get_legal_plays()}
        assert kinds == {PlayType.SINGLE, PlayType.PAIR}

    def test_finished_game_has_no_plays(self):
        state = GameState.from_hands(human=cards("9C"), computer=cards("4S 6H"))
        assert state.with_play(cards("9C")).get_legal_plays() == []
