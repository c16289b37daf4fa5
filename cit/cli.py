#!/usr/bin/env python3
"""cit CLI entrypoint."""

import argparse
import logging
import sys
from pathlib import Path

from cit import __version__
from cit.commands.browse import cmd_browse
from cit.git import LogUnavailable, is_inside_work_tree
from cit.history import BranchCache, BranchResolver, build_model
from cit.lib.config import BrowserConfig, load_config
from cit.workflow.checkout import CheckoutExecutor
from cit.workflow.navigator import Navigator
from cit.workflow.reconcile import Reconciler

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(config: BrowserConfig) -> None:
    """Send cit's log records to the configured file, if any.

    Nothing is written to the terminal while the TUI owns it.
    """
    if config.log_file is None:
        return
    handler = logging.FileHandler(config.log_file)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("cit")
    root.addHandler(handler)
    root.setLevel(config.log_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cit',
        description='Browse commit history and check out any commit',
    )
    parser.add_argument('-C', dest='repo', type=Path, default=Path('.'),
                        help='Run as if started in this directory')
    parser.add_argument('--poll-interval', type=float,
                        help='Seconds between HEAD checks (default: 0.5, env CIT_POLL_INTERVAL)')
    parser.add_argument('--log-file', type=Path,
                        help='Write debug log to this file (env CIT_LOG_FILE)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log at DEBUG level (needs --log-file)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def resolve_config(args) -> BrowserConfig:
    """Environment config with CLI overrides applied."""
    config = load_config(args.repo.resolve())
    if args.poll_interval is not None:
        if args.poll_interval <= 0:
            raise ValueError("--poll-interval must be greater than 0")
        config.poll_interval = args.poll_interval
    if args.log_file is not None:
        config.log_file = args.log_file
    if args.verbose:
        config.log_level = "DEBUG"
    return config


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    setup_logging(config)
    repo = config.repo_path

    if not is_inside_work_tree(repo):
        print(f"ERROR: Not inside a git repository: {repo}", file=sys.stderr)
        return 1

    cache = BranchCache(repo)
    resolver = BranchResolver(cache, max_workers=config.resolver_workers)

    try:
        model = build_model(repo, resolver)
    except LogUnavailable as e:
        print(f"ERROR: Failed to read commit log: {e}", file=sys.stderr)
        resolver.shutdown()
        return 1

    reconciler = Reconciler(repo, model, cache, resolver, interval=config.poll_interval)
    reconciler.tick()
    executor = CheckoutExecutor(repo, reconciler, status_max_length=config.status_max_length)
    navigator = Navigator(model, executor, resolver)

    logger.info(f"Starting browser for {repo}")
    try:
        return cmd_browse(navigator, reconciler, config)
    finally:
        reconciler.stop()
        resolver.shutdown()


if __name__ == '__main__':
    sys.exit(main())
