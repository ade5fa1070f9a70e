"""Main entry point for SkillMatch."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from skillmatch import __version__
from skillmatch.config.settings import Settings
from skillmatch.utils.logging import configure_logging


def _limit(value: str) -> int:
    limit = int(value)
    if limit < 1:
        raise argparse.ArgumentTypeError("--limit must be at least 1")
    return limit


def _dump_json(payload: object) -> str:
    def _default(value: object):
        to_dict = getattr(value, "to_dict", None)
        if callable(to_dict):
            return to_dict()
        model_dump = getattr(value, "model_dump", None)
        if callable(model_dump):
            return model_dump(mode="json")
        return str(value)

    return json.dumps(payload, indent=2, default=_default)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="skillmatch",
        description="SkillMatch: rank candidates for jobs and jobs for candidates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m skillmatch candidates job-42 --pool data/pool.yaml --limit 5
  python -m skillmatch jobs cand-7 --json
  python -m skillmatch feedback job-42 cand-7 --decision hire
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )
    parser.add_argument(
        "--pool",
        type=Path,
        default=None,
        help="YAML/JSON file with jobs and candidates (overrides POOL_PATH)",
    )
    parser.add_argument(
        "--weights-db",
        type=Path,
        default=None,
        help="SQLite file for persisted weights (overrides WEIGHTS_DB_PATH)",
    )

    subparsers = parser.add_subparsers(
        dest="mode",
        title="modes",
        description="Available commands",
    )

    candidates_parser = subparsers.add_parser(
        "candidates",
        help="Rank candidates for a job",
    )
    candidates_parser.add_argument("job_id", help="Anchor job ID")

    jobs_parser = subparsers.add_parser(
        "jobs",
        help="Rank jobs for a candidate",
    )
    jobs_parser.add_argument("candidate_id", help="Anchor candidate ID")

    for ranking_parser in (candidates_parser, jobs_parser):
        ranking_parser.add_argument(
            "--limit",
            type=_limit,
            default=None,
            help="Maximum number of matches to show",
        )
        ranking_parser.add_argument(
            "--json",
            action="store_true",
            help="Print matches as JSON instead of text",
        )

    feedback_parser = subparsers.add_parser(
        "feedback",
        help="Record a hiring decision and update the weights",
    )
    feedback_parser.add_argument("job_id", help="Job ID")
    feedback_parser.add_argument("candidate_id", help="Candidate ID")
    feedback_parser.add_argument(
        "--decision",
        choices=["hire", "reject"],
        default="hire",
        help="Employer decision (default: hire)",
    )

    return parser


async def _run(parsed: argparse.Namespace, settings: Settings) -> int:
    from skillmatch.matching.repository import NotFoundError, load_pool
    from skillmatch.matching.service import MatchingService, format_match
    from skillmatch.matching.weights_store import WeightStore

    repo = load_pool(parsed.pool or settings.pool_path)

    db_path = parsed.weights_db or settings.weights_db_path
    store = WeightStore(db_path) if db_path else None
    if store is not None:
        await store.initialize()

    try:
        service = MatchingService(repo, repo, store=store)
        await service.load_weights()

        try:
            if parsed.mode == "candidates":
                limit = parsed.limit or settings.default_limit
                matches = await service.find_matching_candidates(parsed.job_id, limit)
            elif parsed.mode == "jobs":
                limit = parsed.limit or settings.default_limit
                matches = await service.find_matching_jobs(parsed.candidate_id, limit)
            else:
                weights = await service.update_learning_models(
                    parsed.job_id, parsed.candidate_id, parsed.decision
                )
                if weights is None:
                    print("Candidate not found; weights unchanged", file=sys.stderr)
                    return 1
                print(
                    "Weights: "
                    f"skill={weights.skill:.3f} "
                    f"experience={weights.experience:.3f} "
                    f"education={weights.education:.3f}"
                )
                return 0
        except NotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        if parsed.json:
            print(_dump_json([match.to_dict() for match in matches]))
        else:
            for rank, match in enumerate(matches, start=1):
                print(f"#{rank}")
                print(format_match(match))
                print()
        return 0
    finally:
        if store is not None:
            await store.close()


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    try:
        settings = Settings()
    except ValidationError as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level)

    if parsed.mode is None:
        parser.print_help()
        return 0

    logger.info("SkillMatch v%s running %s", __version__, parsed.mode)

    try:
        return asyncio.run(_run(parsed, settings))
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
