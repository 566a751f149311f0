#!/usr/bin/env python3
"""
评估脚本

Usage:
    python scripts/evaluate.py --games 50
    python scripts/evaluate.py --policies easy hard random --players 3 --output results.json
"""
import argparse
import logging
import random
import sys
from pathlib import Path
import json

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from ai.policy import CPUPolicy, Policy, RandomPolicy
from core.config import GameSettings
from evaluation import Arena

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Daifugo CPU Evaluation")

    parser.add_argument(
        "--policies",
        nargs="+",
        default=["easy", "normal", "hard"],
        choices=["easy", "normal", "hard", "random"],
        help="Policies to compare",
    )
    parser.add_argument("--games", type=int, default=20, help="Games per seating")
    parser.add_argument("--players", type=int, default=4, choices=[3, 4])
    parser.add_argument("--no-revolution", action="store_true")
    parser.add_argument("--no-eight-cut", action="store_true")
    parser.add_argument("--no-stairs", action="store_true")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--output", type=str, help="Output file for results")

    return parser.parse_args()


def create_policy(name: str, seed: int) -> Policy:
    rng = random.Random(seed)
    if name == "random":
        return RandomPolicy(rng=rng)
    return CPUPolicy(name, rng=rng)


def main():
    args = parse_args()

    settings = GameSettings(
        player_count=args.players,
        revolution_enabled=not args.no_revolution,
        eight_cut_enabled=not args.no_eight_cut,
        stairs_enabled=not args.no_stairs,
    )
    policies = [create_policy(name, args.seed + i) for i, name in enumerate(args.policies)]

    logger.info(f"Running round robin: {', '.join(p.name for p in policies)}")
    arena = Arena(settings, seed=args.seed)
    result = arena.round_robin(policies, games_per_seating=args.games)

    logger.info("=" * 50)
    logger.info("Tournament Results")
    logger.info("=" * 50)
    for name, avg_position in result.get_ranking():
        stats = result.standings[name]
        logger.info(
            f"{name}: avg position {avg_position:.2f}, "
            f"top {stats['top_rate']:.2%}, bottom {stats['bottom_rate']:.2%} "
            f"({int(stats['games'])} seats)"
        )
    logger.info("=" * 50)

    revolutions = sum(m.revolutions for m in result.matches)
    eight_cuts = sum(m.eight_cuts for m in result.matches)
    logger.info(f"Games: {result.total_games}, revolutions: {revolutions}, eight-cuts: {eight_cuts}")

    if args.output:
        with open(args.output, "w") as f:
            json.dump({"standings": result.standings, "total_games": result.total_games}, f, indent=2)
        logger.info(f"Results saved to {args.output}")


if __name__ == "__main__":
    main()
