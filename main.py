#!/usr/bin/env python3
"""
Gaslight Sweeper - Main entry point.

Usage:
    python main.py play [--difficulty {beginner,intermediate,expert}] [--mode {model,scripted}]
    python main.py health
    python main.py validate
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from agents import AdviceMode
from game import BEGINNER, EXPERT, INTERMEDIATE, GameError, GameState, GameStatus
from llm import CompletionService
from orchestration import (
    AgentRouter,
    ArchitectureValidator,
    GameController,
    ReportFormat,
    format_metrics,
    generate_report,
)

DIFFICULTIES = {
    "beginner": BEGINNER,
    "intermediate": INTERMEDIATE,
    "expert": EXPERT,
}

SYMBOLS = {-1: ".", -2: "F", 0: " ", 9: "*"}

HELP_TEXT = """Commands:
  a X Y   ask the advisor about tile (X, Y)
  c X Y   click tile (X, Y)
  f X Y   toggle a flag on tile (X, Y)
  q       quit"""


def render(state: GameState) -> str:
    """Draw the grid as text, x across and y down."""
    obs = state.observation()
    header = "   " + " ".join(str(x % 10) for x in range(state.width))
    rows = [header]
    for y in range(state.height):
        cells = " ".join(SYMBOLS.get(int(v), str(int(v))) for v in obs[y])
        rows.append(f"{y:>2} {cells}")
    return "\n".join(rows)


async def play(args: argparse.Namespace) -> None:
    """Play an interactive session in the terminal."""
    router = AgentRouter(advice_mode=AdviceMode(args.mode))
    controller = GameController(DIFFICULTIES[args.difficulty], router=router, seed=args.seed)
    print(HELP_TEXT)

    while controller.engine.is_playing:
        print()
        print(render(controller.get_game_state()))
        try:
            line = input("> ").strip().split()
        except EOFError:
            break
        if not line:
            continue
        if line[0] == "q":
            break
        if line[0] not in ("a", "c", "f") or len(line) != 3:
            print(HELP_TEXT)
            continue

        try:
            coord = (int(line[1]), int(line[2]))
        except ValueError:
            print("Coordinates must be integers")
            continue

        try:
            if line[0] == "a":
                advice = await controller.request_advice(coord)
                print(f"Advisor ({advice.confidence_level}% confident): "
                      f"{advice.recommendation.value.upper()} - {advice.reasoning}")
            elif line[0] == "c":
                controller.click_tile(coord)
            else:
                controller.flag_tile(coord)
        except GameError as exc:
            print(f"[{exc.code}] {exc.message}")

    print()
    print(render(controller.get_game_state()))
    status = controller.engine.game_status
    if status == GameStatus.PLAYING:
        print("\nSession ended.")
    else:
        print(f"\nGame {status.value}!")

    report = await controller.generate_post_mortem_analysis()
    print(format_metrics(
        report.metrics,
        controller.get_game_history(),
        report.analysis,
        fmt=ReportFormat(args.report),
    ))


async def health(args: argparse.Namespace) -> None:
    """Check the completion backend and every agent."""
    service = CompletionService()
    print(f"Completion service: {'OK' if await service.health_check() else 'UNAVAILABLE'}")
    report = await AgentRouter(service).health_check()
    print(f"Confident advisor:    {report.confident_advisor}")
    print(f"Silent analyst:       {report.silent_analyst}")
    print(f"Post-mortem narrator: {report.post_mortem_narrator}")
    print(f"Overall:              {report.overall}")


async def validate(args: argparse.Namespace) -> None:
    """Print the architecture validation report."""
    service = CompletionService()
    validator = ArchitectureValidator(AgentRouter(service), service)
    print(generate_report(await validator.validate_architecture()))


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Gaslight Sweeper - Minesweeper with an overconfident AI advisor"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game in the terminal")
    play_parser.add_argument(
        "--difficulty",
        choices=sorted(DIFFICULTIES),
        default="beginner",
        help="Grid preset",
    )
    play_parser.add_argument(
        "--mode",
        choices=[m.value for m in AdviceMode],
        default=AdviceMode.MODEL.value,
        help="Advice source",
    )
    play_parser.add_argument(
        "--seed", type=int, default=None, help="Seed for mine placement"
    )
    play_parser.add_argument(
        "--report",
        choices=[f.value for f in ReportFormat],
        default=ReportFormat.CONSOLE.value,
        help="End-of-game report format",
    )

    subparsers.add_parser("health", help="Check model and agent health")
    subparsers.add_parser("validate", help="Validate the multi-agent architecture")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        asyncio.run(play(args))
    elif args.command == "health":
        asyncio.run(health(args))
    elif args.command == "validate":
        asyncio.run(validate(args))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
