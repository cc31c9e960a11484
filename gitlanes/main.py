#!/usr/bin/env python3
"""
gitlanes - horizontal commit graph for git repositories
"""

import argparse
import logging
import sys
from pathlib import Path

import pygit2

from gitlanes.config.settings import Settings
from gitlanes.git_backend.cache import CachedHistoryProvider, HistoryCache
from gitlanes.git_backend.repository import GitLanesRepository, HistoryFilters
from gitlanes.graph.layout import GraphLayout, render_graph
from gitlanes.graph.svg import layout_to_json, layout_to_svg

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog="gitlanes",
        description="gitlanes - render a git history as a horizontal lane graph",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Repository path (default: the repository containing the current directory)",
    )
    parser.add_argument("--max-count", type=int, default=None, help="Maximum commits to load")
    parser.add_argument("--branch", default=None, help="Only show history reachable from this branch")
    parser.add_argument("--author", default=None, help="Only show commits by this author")
    parser.add_argument("--grep", default=None, help="Only show commits whose message contains TEXT")
    parser.add_argument("--no-merges", action="store_true", help="Hide merge commits")
    parser.add_argument("--svg", type=Path, default=None, help="Write the graph as SVG to FILE")
    parser.add_argument("--json", type=Path, default=None, help="Write the layout as JSON to FILE")
    parser.add_argument("--view", action="store_true", help="Open the graph in a window")
    parser.add_argument("--config", type=Path, default=None, help="Settings file to use")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_filters(args: argparse.Namespace, settings: Settings) -> HistoryFilters:
    max_commits = args.max_count if args.max_count is not None else settings.get_max_commits()
    return HistoryFilters(
        max_commits=max(1, max_commits),
        branch=args.branch,
        author=args.author,
        message=args.grep,
        show_merges=not args.no_merges,
    )


def show_layout(layout: GraphLayout) -> int:
    """Open a window with the graph; returns the Qt exit code"""
    from PySide6.QtWidgets import QApplication

    from gitlanes.ui.git_graph_view import GitGraphView

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("gitlanes")

    view = GitGraphView(layout)
    view.setWindowTitle("gitlanes")
    view.resize(1200, 600)
    view.show()
    return app.exec()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = Settings(args.config)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError too
        logger.error("Invalid settings: %s", e)
        sys.exit(1)
    config = settings.layout_config()

    try:
        repo = GitLanesRepository(args.path)
        provider = CachedHistoryProvider(
            repo, HistoryCache(settings.get_cache_ttl(), settings.get_cache_size())
        )
        commits = provider.get_commits(build_filters(args, settings))
    except (ValueError, KeyError, pygit2.GitError) as e:
        logger.error("Cannot read history: %s", e)
        sys.exit(1)

    layout = render_graph(commits, config)

    if args.svg is not None:
        args.svg.write_text(layout_to_svg(layout), encoding="utf-8")
        logger.info("Wrote %s", args.svg)
    if args.json is not None:
        args.json.write_text(layout_to_json(layout), encoding="utf-8")
        logger.info("Wrote %s", args.json)
    if args.view:
        sys.exit(show_layout(layout))
    if args.svg is None and args.json is None:
        sys.stdout.write(layout_to_svg(layout))


if __name__ == "__main__":
    main()
