#!/usr/bin/env python3
"""
PMR wizard: compute an onboarding PMR or simulate a post-match update.

Onboarding estimate from the five questionnaire answers:
    python scripts/pmr_wizard.py onboarding --q1 intermediaire --q2 3-6ans \\
        --q3 debut-competition --q4 3 --q5 3

Post-match simulation (players are ID NAME PMR RELIABILITY, team 1 first):
    python scripts/pmr_wizard.py post-match \\
        --player p1 "Joueur A" 4.5 50 --player p2 "Joueur B" 5.0 50 \\
        --player p3 "Joueur C" 4.8 50 --player p4 "Joueur D" 5.2 50 \\
        --score "6-4 4-6 7-5"

Add --json before the command for machine-readable output:
    python scripts/pmr_wizard.py --json onboarding ...
"""
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

# Add src to path so this script can be run directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pmr.exceptions import InvalidAnswerError, InvalidScoreError
from pmr.logging_config import configure_logging
from pmr.rating import (
    AdjustmentParams,
    PlayerState,
    adjust_after_match,
    estimate_from_onboarding,
    parse_match_score,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute or simulate PMR ratings.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    onboarding = subparsers.add_parser("onboarding", help="Estimate a PMR from questionnaire answers.")
    onboarding.add_argument("--q1", required=True, help="Self-assessed level (debutant .. elite).")
    onboarding.add_argument("--q2", required=True, help="Experience (moins-1an .. plus-10ans).")
    onboarding.add_argument("--q3", required=True, help="Competition tier (loisir .. competiteur-avance).")
    onboarding.add_argument("--q4", required=True, help="Volley skill, 1-5.")
    onboarding.add_argument("--q5", required=True, help="Wall play skill, 1-5.")

    post_match = subparsers.add_parser("post-match", help="Simulate the PMR update after a match.")
    post_match.add_argument(
        "--player",
        nargs=4,
        action="append",
        metavar=("ID", "NAME", "PMR", "RELIABILITY"),
        required=True,
        help="A player; give exactly four, team 1 first.",
    )
    post_match.add_argument(
        "--score",
        required=True,
        help='Match score from team 1\'s side, e.g. "6-4 4-6 7-5".',
    )
    return parser


def _parse_players(raw_players: list[list[str]]) -> list[PlayerState]:
    if len(raw_players) != 4:
        raise ValueError(f"exactly four --player options are required, got {len(raw_players)}")
    players = []
    for player_id, name, rating, reliability in raw_players:
        players.append(
            PlayerState(
                id=player_id,
                display_name=name,
                rating=float(rating),
                reliability=float(reliability),
            )
        )
    return players


def run_onboarding(args: argparse.Namespace) -> int:
    result = estimate_from_onboarding({
        "q1": args.q1,
        "q2": args.q2,
        "q3": args.q3,
        "q4": args.q4,
        "q5": args.q5,
    })

    if args.json:
        print(json.dumps({
            "rating": result.rating,
            "per_question_debug": [d.to_dict() for d in result.per_question_debug],
        }, indent=2))
        return 0

    print(f"PMR: {result.rating:.1f}")
    print()
    print(f"{'Question':<9} {'Answer':<22} {'mu':>5} {'tau':>5} {'weight':>6} {'base':>7} {'weighted':>8}")
    for d in result.per_question_debug:
        print(
            f"{d.question_id:<9} {d.answer:<22} {d.expected_value:>5.1f} {d.tolerance:>5.1f} "
            f"{d.weight:>6.1f} {d.score_at_winner_base:>7.3f} {d.score_at_winner_weighted:>8.3f}"
        )
    return 0


def run_post_match(args: argparse.Namespace) -> int:
    players = _parse_players(args.player)
    score = parse_match_score(args.score)

    results = adjust_after_match(
        team1=players[:2],
        team2=players[2:],
        sets=score,
        params=AdjustmentParams.from_settings(),
    )

    if args.json:
        print(json.dumps([asdict(r) for r in results], indent=2))
        return 0

    print(f"Score: {score.to_display_string()}")
    print()
    for r in results:
        print(
            f"{r.display_name:<20} PMR {r.previous_rating:.2f} -> {r.new_rating:.2f} ({r.delta:+.2f})  "
            f"reliability {r.previous_reliability:.1f} -> {r.new_reliability:.1f} ({r.delta_reliability:+.1f})"
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging()

    try:
        if args.command == "onboarding":
            return run_onboarding(args)
        return run_post_match(args)
    except (InvalidAnswerError, InvalidScoreError, ValueError) as exc:
        print(f"ERROR: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
