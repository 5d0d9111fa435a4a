"""Command line entry point for the rank tracker."""

import argparse
import asyncio
import signal
import sys
from typing import Optional, Sequence, Tuple

import structlog

from ranktracker.core.config import Settings, get_global_settings
from ranktracker.core.database import get_db_manager
from ranktracker.core.enums import JobStatus, Region
from ranktracker.core.exceptions import TrackerError
from ranktracker.core.logging import setup_logging
from ranktracker.core.riot_api import RiotAPIClient
from ranktracker.features.tracking import (
    GameIdentity,
    LoggingNotificationSink,
    RiotTrackingGateway,
    SQLAlchemyAccountRepository,
    TrackedAccount,
    build_leaderboard,
)
from ranktracker.features.tracking.ranks import render_points_delta
from ranktracker.jobs import TrackerCycleJob, shutdown_scheduler, start_scheduler

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ranktracker",
        description="Track ranked progression of registered League of Legends accounts.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Poll tracked accounts")
    run_parser.add_argument(
        "--once", action="store_true", help="Run a single cycle and exit"
    )

    add_parser = subparsers.add_parser("add", help="Register an account by Riot ID")
    add_parser.add_argument("riot_id", help="Riot ID as GAME_NAME#TAG")
    add_parser.add_argument(
        "--region",
        required=True,
        choices=[region.value for region in Region],
        help="Server code of the account",
    )
    add_parser.add_argument("--owner", required=True, help="Who registers the account")

    remove_parser = subparsers.add_parser(
        "remove", help="Stop tracking an account registered by an owner"
    )
    remove_parser.add_argument("riot_id", help="Riot ID as GAME_NAME#TAG")
    remove_parser.add_argument(
        "--region",
        required=True,
        choices=[region.value for region in Region],
        help="Server code of the account",
    )
    remove_parser.add_argument("--owner", required=True, help="Who registered the account")

    board_parser = subparsers.add_parser("leaderboard", help="Print the leaderboard")
    board_parser.add_argument("--limit", type=int, default=None)

    return parser


def parse_riot_id(riot_id: str) -> Tuple[str, str]:
    """Split ``name#tag``; raises ValueError when either part is missing."""
    game_name, sep, tag_line = riot_id.rpartition("#")
    if not sep or not game_name.strip() or not tag_line.strip():
        raise ValueError(f"Invalid Riot ID '{riot_id}', expected GAME_NAME#TAG")
    return game_name.strip(), tag_line.strip()


async def run_tracker(settings: Settings, once: bool) -> int:
    """Run one cycle, or the scheduled loop until a stop signal arrives."""
    db = get_db_manager()
    await db.create_all()
    job = TrackerCycleJob(
        repository=SQLAlchemyAccountRepository(db),
        sink=LoggingNotificationSink(),
        settings=settings,
    )

    try:
        if once:
            execution = await job.run()
            return 0 if execution.status == JobStatus.SUCCESS else 1

        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, stop.set)

        start_scheduler(job, settings.poll_interval_seconds)
        logger.info(
            "Rank tracker running",
            interval_seconds=settings.poll_interval_seconds,
        )
        await stop.wait()
        logger.info("Stop signal received")
        shutdown_scheduler()
        return 0
    finally:
        await db.close()


async def add_account(
    settings: Settings, riot_id: str, region: Region, owner_id: str
) -> int:
    """Resolve a Riot ID and register it as a cold-start tracked account."""
    game_name, tag_line = parse_riot_id(riot_id)
    db = get_db_manager()
    await db.create_all()
    try:
        async with RiotAPIClient(
            api_key=settings.riot_api_key,
            timeout=settings.riot_request_timeout,
        ) as client:
            account_ref, identity = await RiotTrackingGateway(client).find_account(
                game_name, tag_line
            )
        account = await SQLAlchemyAccountRepository(db).add_account(
            TrackedAccount(
                account_ref=account_ref,
                owner_id=owner_id,
                region=region,
                game_identity=identity,
            )
        )
        logger.info(
            "Account registered",
            account_ref=account.account_ref,
            riot_id=str(account.game_identity),
            region=region.value,
        )
        return 0
    finally:
        await db.close()


async def remove_account(riot_id: str, region: Region, owner_id: str) -> int:
    """Stop tracking the account the owner registered under this Riot ID and server."""
    game_name, tag_line = parse_riot_id(riot_id)
    identity = GameIdentity(game_name=game_name, tag_line=tag_line)
    db = get_db_manager()
    await db.create_all()
    try:
        repository = SQLAlchemyAccountRepository(db)
        account = await repository.find_registered_account(owner_id, identity, region)
        if account is None or not await repository.remove_account(account.account_ref):
            logger.warning(
                "Account not found",
                riot_id=str(identity),
                region=region.value,
                owner_id=owner_id,
            )
            return 1
        logger.info(
            "Account removed",
            account_ref=account.account_ref,
            riot_id=str(identity),
            region=region.value,
        )
        return 0
    finally:
        await db.close()


async def print_leaderboard(limit: Optional[int]) -> int:
    db = get_db_manager()
    await db.create_all()
    try:
        accounts = await SQLAlchemyAccountRepository(db).list_tracked_accounts()
    finally:
        await db.close()

    entries = build_leaderboard(accounts)
    if limit is not None:
        entries = entries[:limit]
    for entry in entries:
        rank = entry.snapshot.display_rank if entry.snapshot else "Not observed"
        points = entry.snapshot.points if entry.snapshot else 0
        trend = (
            render_points_delta(entry.recent_trend)
            if entry.recent_trend is not None
            else "-"
        )
        print(
            f"{entry.position:>3}. {str(entry.game_identity):<28} "
            f"{entry.region.value:<4} {rank:<14} {points:>5} LP  {trend}"
        )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_global_settings()
    setup_logging(settings.log_level, settings.json_logs)

    try:
        if args.command == "run":
            return asyncio.run(run_tracker(settings, args.once))
        if args.command == "add":
            return asyncio.run(
                add_account(settings, args.riot_id, Region(args.region), args.owner)
            )
        if args.command == "remove":
            return asyncio.run(
                remove_account(args.riot_id, Region(args.region), args.owner)
            )
        return asyncio.run(print_leaderboard(args.limit))
    except (TrackerError, ValueError) as error:
        logger.error("Command failed", command=args.command, error=str(error))
        return 1


if __name__ == "__main__":
    sys.exit(main())
