"""Main entry point with CLI."""
import argparse
import logging
import sys
from datetime import date, datetime, time

from bbnotify.config import Config
from bbnotify.errors import BookBuildingNotifyError, ConfigError
from bbnotify.jobs.runner import open_runner
from bbnotify.logging_conf import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="IPO book-building schedule notifier")

    # Mode flags
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start the HTTP trigger instead of running once",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Dry run: local JSON store, notifications are only logged",
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Development mode (verbose logs, parsed records dumped)",
    )
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Evaluate milestones as if run on this date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to a .env file (default: search from the current directory)",
    )

    # Server options
    parser.add_argument("--host", default="0.0.0.0", help="HTTP trigger host")
    parser.add_argument("--port", type=int, default=8000, help="HTTP trigger port")

    args = parser.parse_args(argv)
    if args.serve and args.today:
        parser.error("--today cannot be combined with --serve")
    return args


def run_once(config: Config, dry_run: bool, now: datetime | None = None) -> int:
    """Run one notification pass, returning a process exit code."""
    try:
        with open_runner(config, dry_run=dry_run, now=now) as runner:
            runner.run()
    except BookBuildingNotifyError as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1
    return 0


def serve(config: Config, dry_run: bool, host: str, port: int) -> int:
    """Serve the HTTP trigger until interrupted."""
    import uvicorn

    from bbnotify.api.main import create_app

    uvicorn.run(create_app(config, dry_run=dry_run), host=host, port=port)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    config = Config.from_env(args.env_file)

    setup_logging("DEBUG" if args.dev else config.log_level)

    try:
        config.validate(require_remote=not args.dry_run)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    now = None
    if args.today:
        now = datetime.combine(args.today, time(12, 0), tzinfo=config.tz)

    logger.info("=" * 60)
    logger.info("Book-building Notify Starting")
    logger.info(f"Mode: {'serve' if args.serve else 'run once'}")
    logger.info(f"Schedule URL: {config.schedule_url}")
    logger.info(f"Dry-run: {args.dry_run}")
    if now:
        logger.info(f"Simulated date: {args.today.isoformat()}")
    logger.info("=" * 60)

    if args.serve:
        return serve(config, args.dry_run, args.host, args.port)

    try:
        return run_once(config, args.dry_run, now=now)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
