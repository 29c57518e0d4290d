"""CLI entry point for gitraffe."""

import argparse
import logging
import os
import sys

import gitraffe.io.logging_setup
import gitraffe.settings
from gitraffe.io.git_source import GitSource
from gitraffe.tui.app import GitraffeApp

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Terminal viewer for a git repository's commit graph")
    parser.add_argument(
        "repo",
        nargs="?",
        default=".",
        help="Path to the repository (default: current directory)",
    )
    parser.add_argument(
        "--max-commits",
        type=int,
        default=None,
        help="Maximum number of commits to load (default: 5000). Env: GITRAFFE_MAX_COMMITS",
    )
    parser.add_argument(
        "--diff-line-cap",
        type=int,
        default=None,
        help="Maximum patch lines shown per commit (default: 300)",
    )
    parser.add_argument(
        "--no-all",
        dest="all_refs",
        action="store_false",
        default=None,
        help="Only show history reachable from HEAD instead of all refs",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Log file path. Env: GITRAFFE_LOG_FILE",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    log_path = gitraffe.io.logging_setup.configure(args.log_file)
    logger.info("starting gitraffe, logging to %s", log_path)

    if not os.path.isdir(args.repo):
        print(f"Error: not a directory: {args.repo}", file=sys.stderr)
        return 1

    config = gitraffe.settings.load_config(
        args.repo,
        max_commits=args.max_commits,
        diff_line_cap=args.diff_line_cap,
        all_refs=args.all_refs,
    )
    logger.info("opening repository: %s (%s)", config.repo_path, config)

    app = GitraffeApp(GitSource(config), repo_path=config.repo_path)
    try:
        app.run()
    except Exception as e:
        logger.exception("program error")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if app.error_log:
        print("\n".join(app.error_log), file=sys.stderr)
    logger.info("gitraffe exited normally")
    return 0


if __name__ == "__main__":
    sys.exit(main())
