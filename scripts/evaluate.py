#!/usr/bin/env python3
"""
评估脚本

Usage:
    python scripts/evaluate.py --agent defensive --opponent random --games 200
    python scripts/evaluate.py --compare --agent greedy --opponent defensive
    python scripts/evaluate.py --tournament --games 50
"""
import argparse
import logging
import sys
from pathlib import Path
import json

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core.config import GameConfig, StrategyConfig
from evaluation import (
    Evaluator,
    RandomAgent,
    GreedyAgent,
    DefensiveAgent,
    Arena,
    EloSystem,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Pusoy Dos Evaluation")

    # 模式
    parser.add_argument("--compare", action="store_true", help="Compare two agents")
    parser.add_argument("--tournament", action="store_true", help="Run round-robin tournament")

    # 智能体
    agent_choices = ["random", "greedy", "defensive"]
    parser.add_argument("--agent", type=str, default="defensive", choices=agent_choices)
    parser.add_argument("--opponent", type=str, default="random", choices=agent_choices)
    parser.add_argument("--endgame-threshold", type=int, default=3)
    parser.add_argument("--caution-threshold", type=int, default=5)
    parser.add_argument("--caution-probability", type=float, default=0.5)

    # 评估参数
    parser.add_argument("--games", type=int, default=100, help="Number of games")
    parser.add_argument("--hand-size", type=int, default=10)
    parser.add_argument("--seed", type=int, default=0)

    # 其他
    parser.add_argument("--output", type=str, help="Output file for results")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")

    return parser.parse_args()


def build_agent(kind: str, name: str, args):
    """按类型创建智能体"""
    if kind == "random":
        return RandomAgent(name, seed=args.seed)
    if kind == "greedy":
        return GreedyAgent(name)
    strategy = StrategyConfig(
        endgame_threshold=args.endgame_threshold,
        caution_threshold=args.caution_threshold,
        caution_probability=args.caution_probability,
    )
    return DefensiveAgent(name, config=strategy, seed=args.seed)


def evaluate_single(args):
    """评估单个智能体"""
    logger.info(f"Evaluating {args.agent} against {args.opponent}")

    agent = build_agent(args.agent, args.agent, args)
    opponent = build_agent(args.opponent, f"{args.opponent}_opponent", args)

    evaluator = Evaluator(GameConfig(hand_size=args.hand_size), seed=args.seed)
    result = evaluator.evaluate(agent, n_games=args.games, opponent=opponent, verbose=args.verbose)

    logger.info("=" * 50)
    logger.info("Evaluation Results")
    logger.info("=" * 50)
    logger.info(f"Win Rate: {result.win_rate:.2%}")
    logger.info(f"First Move Win Rate: {result.first_move_win_rate:.2%}")
    logger.info(f"Average Length: {result.avg_length:.1f}")
    logger.info(f"Average Cards Left: {result.avg_cards_left:.2f}")
    logger.info(f"Unfinished: {result.unfinished}")
    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w") as f:
            json.dump({
                "win_rate": result.win_rate,
                "first_move_win_rate": result.first_move_win_rate,
                "avg_length": result.avg_length,
                "avg_cards_left": result.avg_cards_left,
                "unfinished": result.unfinished,
                "games_played": result.games_played,
            }, f, indent=2)
        logger.info(f"Results saved to {args.output}")

    return result


def compare_agents(args):
    """比较两个智能体"""
    logger.info(f"Comparing agents: {args.agent} vs {args.opponent}")

    agent1 = build_agent(args.agent, f"{args.agent}_1", args)
    agent2 = build_agent(args.opponent, f"{args.opponent}_2", args)

    evaluator = Evaluator(GameConfig(hand_size=args.hand_size), seed=args.seed)
    result = evaluator.compare(agent1, agent2, n_games=args.games)

    logger.info("=" * 50)
    logger.info("Comparison Results")
    logger.info("=" * 50)
    logger.info(f"{agent1.name} wins: {result['agent1_wins']} ({result['agent1_win_rate']:.2%})")
    logger.info(f"{agent2.name} wins: {result['agent2_wins']} ({result['agent2_win_rate']:.2%})")
    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w") as f:
            json.dump(result, f, indent=2)

    return result


def run_tournament(args):
    """运行循环赛"""
    agents = [
        RandomAgent("random", seed=args.seed),
        GreedyAgent("greedy"),
        build_agent("defensive", "defensive", args),
    ]
    logger.info(f"Running tournament with {len(agents)} agents")

    arena = Arena(GameConfig(hand_size=args.hand_size), seed=args.seed)
    elo = EloSystem()
    result = arena.round_robin(agents, games_per_match=args.games, elo=elo)

    logger.info("=" * 50)
    logger.info("Tournament Results")
    logger.info("=" * 50)

    ranking = result.get_ranking()
    for i, (name, win_rate) in enumerate(ranking):
        logger.info(f"{i+1}. {name}: {win_rate:.2%}")

    logger.info("=" * 50)
    logger.info("ELO Ratings:")
    for player in elo.get_ranking():
        logger.info(f"  {player.name}: {player.rating:.0f}")

    if args.output:
        with open(args.output, "w") as f:
            json.dump({
                "rankings": ranking,
                "total_games": result.total_games,
                "elo": {p.name: p.rating for p in elo.get_ranking()},
            }, f, indent=2)

    return result


def main():
    args = parse_args()

    if args.tournament:
        run_tournament(args)
    elif args.compare:
        compare_agents(args)
    else:
        evaluate_single(args)


if __name__ == "__main__":
    main()
