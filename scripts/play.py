#!/usr/bin/env python3
"""
对战脚本

Usage:
    python scripts/play.py --mode play   # 与电脑对战
    python scripts/play.py --mode watch  # 观看 AI 对战
    python scripts/play.py --mode watch --agent greedy --opponent defensive --games 3
"""
import argparse
import logging
import sys
from pathlib import Path
import time

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core.cards import cards_to_str, str_to_cards
from core.config import GameConfig, StrategyConfig
from core.session import GameSession, Rejection
from core.state import GameState, Player
from evaluation import RandomAgent, GreedyAgent, DefensiveAgent

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)

AGENT_TYPES = {
    "random": RandomAgent,
    "greedy": GreedyAgent,
    "defensive": DefensiveAgent,
}


def parse_args():
    parser = argparse.ArgumentParser(description="Pusoy Dos Play")

    parser.add_argument(
        "--mode",
        type=str,
        default="play",
        choices=["watch", "play"],
        help="Mode: play against the computer or watch two agents",
    )
    parser.add_argument("--agent", type=str, default="defensive", choices=sorted(AGENT_TYPES))
    parser.add_argument("--opponent", type=str, default="defensive", choices=sorted(AGENT_TYPES))
    parser.add_argument("--hand-size", type=int, default=10, help="Cards dealt to each player (7-10)")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--delay", type=float, default=0.5, help="Delay between moves")
    parser.add_argument("--games", type=int, default=1, help="Number of games")

    return parser.parse_args()


def print_table(session: GameSession):
    """打印对局状态 (电脑手牌只显示张数)"""
    snap = session.snapshot()
    print("\n" + "=" * 60)
    print(f"Computer: {len(snap.hands[Player.COMPUTER])} cards    Deck: {snap.deck_count}")
    state = session.state
    incumbent = state.incumbent()
    if incumbent is not None:
        print(f"To beat: {incumbent}")
    elif snap.table:
        print("Round open: play anything")
    print(f"Your hand: {cards_to_str(snap.hands[Player.HUMAN])}")
    print("=" * 60)


def human_turn(session: GameSession) -> bool:
    """读取玩家输入，返回 False 表示退出"""
    while True:
        choice = input("\nCards to play (e.g. '7S 7H'), 'd' to draw, 'q' to quit: ").strip()
        if choice.lower() == 'q':
            return False
        if choice.lower() == 'd':
            outcome = session.draw(Player.HUMAN)
        else:
            try:
                cards = str_to_cards(choice)
            except ValueError as e:
                print(e)
                continue
            outcome = session.attempt_play(cards, Player.HUMAN)

        print(outcome.message)
        if not isinstance(outcome, Rejection):
            return True


def play_session(args):
    """与电脑对战"""
    session = GameSession(GameConfig(hand_size=args.hand_size, seed=args.seed), StrategyConfig())

    for game_idx in range(args.games):
        print(f"\nGame {game_idx + 1}/{args.games}")
        session.start_game()
        print(session.message)

        while not session.state.is_finished:
            if session.state.current_player == Player.HUMAN:
                print_table(session)
                if not human_turn(session):
                    print("Bye")
                    return
            else:
                time.sleep(args.delay)
                outcome = session.ai_take_turn()
                print(outcome.message)

        print(f"\nScore - Player: {session.player_wins}  Computer: {session.computer_wins}")


def watch_game(args):
    """观看 AI 对战"""
    agents = {
        Player.HUMAN: AGENT_TYPES[args.agent](f"{args.agent}_1"),
        Player.COMPUTER: AGENT_TYPES[args.opponent](f"{args.opponent}_2"),
    }
    config = GameConfig(hand_size=args.hand_size, seed=args.seed)

    for game_idx in range(args.games):
        print(f"\n{'='*60}")
        print(f"Game {game_idx + 1}/{args.games}")
        print("=" * 60)

        state = GameState.initial(hand_size=config.hand_size, seed=None if args.seed is None else args.seed + game_idx)
        while not state.is_finished:
            player = state.current_player
            agent = agents[player]
            for p in Player:
                print(f"  {agents[p].name:>14}: {cards_to_str(state.get_hand(p))}")

            play = agent.act(state, state.get_legal_plays(player))
            if play is None:
                print(f"{agent.name} draws" if state.deck else f"{agent.name} passes")
                state = state.with_draw(player)
            else:
                print(f"{agent.name} plays {play}")
                state = state.with_play(play.cards, player)
            time.sleep(args.delay)

        print("\n" + "=" * 60)
        print(f"Winner: {agents[state.winner].name}")
        print(f"Steps: {state.step_count}")
        print("=" * 60)


def main():
    args = parse_args()

    print("=" * 60)
    print("Pusoy Dos")
    print("=" * 60)

    if args.mode == "watch":
        watch_game(args)
    elif args.mode == "play":
        play_session(args)


if __name__ == "__main__":
    main()
