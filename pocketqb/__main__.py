"""Entry point for pocketqb package."""

import argparse
import logging
import random
import sys

logger = logging.getLogger("pocketqb")


def main() -> None:
    """Main entry point for the PocketQB application."""
    parser = argparse.ArgumentParser(
        description="PocketQB - quarterback passing game",
        prog="pocketqb",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Let the autopilot play a full game and print the summary",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the HTTP API",
    )
    parser.add_argument("--week", type=int, default=1, help="Season week (default: 1)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--role",
        choices=["quarterback", "receiver"],
        default="quarterback",
        help="Side of the pass the user plays (default: quarterback)",
    )
    parser.add_argument("--host", type=str, default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.serve:
        from pocketqb.api.main import run_api

        run_api(host=args.host, port=args.port)
    elif args.demo:
        from pocketqb.game import Autopilot, PlayerRole, PlaySession
        from pocketqb.game.drive import summarize

        print("PocketQB (Demo Mode)")
        print("=" * 50)

        with PlaySession(week=args.week, role=PlayerRole(args.role), seed=args.seed) as session:
            print(f"Week {session.week}, difficulty {session.difficulty:.2f}")
            print()
            pilot = Autopilot(random.Random(args.seed))
            log = pilot.play_game(session)
            for entry in log:
                print(entry.format())

            drive = session.drive
            totals = summarize(log)
            print()
            print(f"Final Score: HOME {drive.score.home} - AWAY {drive.score.away}")
            print(
                f"{totals['completions']}/{totals['attempts']}, {totals['yards']} yds, "
                f"{totals['touchdowns']} TD, {totals['interceptions']} INT, "
                f"{totals['sacks']} sacks"
            )
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
