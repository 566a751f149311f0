#!/usr/bin/env python3
"""
对战脚本

Usage:
    python scripts/play.py --mode watch                 # 观看 CPU 对战
    python scripts/play.py --mode play                  # 与 CPU 对战
    python scripts/play.py --mode play --difficulty hard --players 3
"""
import argparse
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional
import time

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core.cards import cards_to_str
from core.combinations import Combination, Pass
from core.config import GameSettings, load_settings, save_settings
from core.game import EventKind, Round, RoundEvent, create_players

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path.home() / ".daifugo" / "settings.json"


def parse_args():
    parser = argparse.ArgumentParser(description="Daifugo Play")

    parser.add_argument(
        "--mode",
        type=str,
        default="watch",
        choices=["watch", "play"],
        help="Mode: watch CPUs or play against them",
    )
    parser.add_argument("--settings", type=str, default=str(DEFAULT_SETTINGS_PATH), help="Settings file")
    parser.add_argument("--save-settings", action="store_true", help="Save the effective settings")
    parser.add_argument("--players", type=int, choices=[3, 4], help="Player count")
    parser.add_argument("--difficulty", type=str, choices=["easy", "normal", "hard"], help="CPU difficulty")
    parser.add_argument("--no-revolution", action="store_true")
    parser.add_argument("--no-eight-cut", action="store_true")
    parser.add_argument("--no-spade3", action="store_true")
    parser.add_argument("--no-stairs", action="store_true")
    parser.add_argument("--no-jokers", action="store_true")
    parser.add_argument("--delay", type=float, default=0.5, help="Delay between CPU moves")
    parser.add_argument("--games", type=int, default=1, help="Number of games")
    parser.add_argument("--seed", type=int, help="Random seed")

    return parser.parse_args()


def build_settings(args) -> GameSettings:
    """读取配置文件并应用命令行覆盖"""
    settings = load_settings(args.settings)
    overrides = {
        "player_count": args.players,
        "cpu_difficulty": args.difficulty,
        "revolution_enabled": False if args.no_revolution else None,
        "eight_cut_enabled": False if args.no_eight_cut else None,
        "spade3_return_enabled": False if args.no_spade3 else None,
        "stairs_enabled": False if args.no_stairs else None,
        "include_jokers": False if args.no_jokers else None,
    }
    merged = settings.to_dict()
    merged.update({k: v for k, v in overrides.items() if v is not None})
    settings = GameSettings.from_dict(merged)

    if args.save_settings:
        save_settings(settings, args.settings)
        logger.info(f"Settings saved to {args.settings}")
    return settings


def describe_event(round_: Round, event: RoundEvent) -> str:
    """事件转文字"""
    name = round_.get_player(event.player_id).name if event.player_id is not None else ""
    if event.kind == EventKind.PLAY:
        return f"{name} plays {cards_to_str(event.cards)}"
    if event.kind == EventKind.PASS:
        return f"{name} passes"
    if event.kind == EventKind.REVOLUTION:
        return "*** Revolution! ***"
    if event.kind == EventKind.EIGHT_CUT:
        return "*** Eight-cut! ***"
    if event.kind == EventKind.FIELD_CLEAR:
        return "--- field cleared ---"
    if event.kind == EventKind.FINISH:
        return f"{name} finishes as {event.rank.title}"
    return "Round over"


def print_new_events(round_: Round, seen: int) -> int:
    for event in round_.events[seen:]:
        logger.info(describe_event(round_, event))
    return len(round_.events)


def print_results(round_: Round):
    logger.info("=" * 60)
    for position, player in enumerate(round_.finish_order):
        logger.info(f"  {position + 1}. {player.name}: {player.rank.title}")
    logger.info("=" * 60)


def watch_game(args, settings: GameSettings, rng: random.Random):
    """观看 CPU 对战"""
    for game_idx in range(args.games):
        logger.info(f"\n{'=' * 60}\nGame {game_idx + 1}/{args.games}\n{'=' * 60}")

        round_ = Round(settings, rng=rng)
        round_.start()
        seen = 0

        while round_.is_running:
            round_.play_cpu_turn()
            seen = print_new_events(round_, seen)
            time.sleep(args.delay)

        print_results(round_)


def prompt_move(round_: Round) -> Optional[Combination]:
    """读取玩家的选择, 返回 None 表示退出"""
    player = round_.current_player
    table = round_.engine.table
    options: List[Combination] = [Pass.create()] + round_.engine.get_playable_hands(player.hand)

    field = cards_to_str(table.field_cards) if not table.is_field_empty else "(empty)"
    logger.info(f"\nField: {field}{'  [revolution]' if table.is_revolution else ''}")
    logger.info(f"Your hand: {cards_to_str(player.hand)}")
    for i, option in enumerate(options):
        logger.info(f"  {i}: {option}")

    while True:
        choice = input("\nChoose a move (or 'q' to quit): ").strip()
        if choice.lower() == 'q':
            return None
        try:
            idx = int(choice)
        except ValueError:
            logger.info("Please enter a number")
            continue
        if 0 <= idx < len(options):
            return options[idx]
        logger.info("Invalid choice, try again")


def play_game(args, settings: GameSettings, rng: random.Random):
    """与 CPU 对战"""
    for game_idx in range(args.games):
        logger.info(f"\n{'=' * 60}\nGame {game_idx + 1}/{args.games}\n{'=' * 60}")

        round_ = Round(
            settings,
            players=create_players(settings.player_count, human_seat=0),
            rng=rng,
        )
        round_.start()
        seen = print_new_events(round_, 0)

        while round_.is_running:
            if round_.current_player.is_human:
                move = prompt_move(round_)
                if move is None:
                    logger.info("Bye")
                    return
                if move.is_pass:
                    round_.pass_turn()
                else:
                    round_.play(move.cards)
            else:
                round_.play_cpu_turn()
                time.sleep(args.delay)
            seen = print_new_events(round_, seen)

        print_results(round_)


def main():
    args = parse_args()
    settings = build_settings(args)
    rng = random.Random(args.seed)

    logger.info("=" * 60)
    logger.info(f"Daifugo ({settings.player_count} players, CPU {settings.cpu_difficulty})")
    logger.info("=" * 60)

    if args.mode == "watch":
        watch_game(args, settings, rng)
    elif args.mode == "play":
        play_game(args, settings, rng)


if __name__ == "__main__":
    main()
