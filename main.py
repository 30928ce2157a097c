"""
TopicTracker - learning topics per programming language

CLI entry point for the language/topic data service.
"""

import argparse
import json
import logging
import sys

from topictracker.models.topic import TopicPayload
from topictracker.tracker import TopicTracker
import config.settings as settings


def setup_logging(log_level: str = "INFO", log_file: str = settings.LOG_FILE):
    """Configure logging for the entire application."""
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=handlers
    )


def _to_json(value):
    if isinstance(value, list):
        return [_to_json(item) for item in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="topictracker",
        description="TopicTracker - track learning topics per programming language",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  topictracker add-language Go
  topictracker add-topic Go "Goroutines"
  topictracker set-status <topic-id> closed
  topictracker topics --status active
  topictracker stats --export
        """
    )

    parser.add_argument(
        "--data-root",
        default=str(settings.DATA_ROOT),
        help=f"Data directory (default: {settings.DATA_ROOT})"
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )
    parser.add_argument(
        "--strict-rename",
        action="store_true",
        default=settings.STRICT_RENAME,
        help="Refuse to rename a language onto a title another language already has"
    )
    parser.add_argument(
        "--strict-topic-update",
        action="store_true",
        default=settings.STRICT_TOPIC_UPDATE,
        help="Refuse to update a topic onto a title already used in its language"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    cmd = commands.add_parser("add-language", help="Add a language")
    cmd.add_argument("title")

    cmd = commands.add_parser("rename-language", help="Change the title of a language")
    cmd.add_argument("old_title")
    cmd.add_argument("new_title")

    commands.add_parser("languages", help="List all languages")

    cmd = commands.add_parser("find-language", help="Look up a language by title")
    cmd.add_argument("title")

    cmd = commands.add_parser("delete-language", help="Delete a language and all of its topics")
    cmd.add_argument("id")

    cmd = commands.add_parser("add-topic", help="Add a topic to a language")
    cmd.add_argument("language")
    cmd.add_argument("title")
    cmd.add_argument("--closed", action="store_true", help="Create the topic as closed")

    cmd = commands.add_parser("update-topic", help="Replace title and status of a topic")
    cmd.add_argument("id")
    cmd.add_argument("title")
    cmd.add_argument("--closed", action="store_true", help="Mark the topic closed")

    cmd = commands.add_parser("set-status", help="Change only the status of a topic")
    cmd.add_argument("id")
    cmd.add_argument("status", choices=["closed", "active"])

    cmd = commands.add_parser("delete-topic", help="Delete a topic")
    cmd.add_argument("id")

    cmd = commands.add_parser("topics", help="List topics by language or by status")
    selector = cmd.add_mutually_exclusive_group(required=True)
    selector.add_argument("--language", help="Language title")
    selector.add_argument("--status", choices=["closed", "active"])

    cmd = commands.add_parser("search", help="Case-insensitive search in topic titles")
    cmd.add_argument("query", nargs="?", default="")

    cmd = commands.add_parser("stats", help="Topic count per language")
    cmd.add_argument(
        "--export",
        action="store_true",
        help="Also write the statistics CSV to --output-dir"
    )
    cmd.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Output directory for --export (default: {settings.OUTPUT_ROOT})"
    )

    return parser


def run_command(tracker: TopicTracker, args: argparse.Namespace):
    """Dispatch a parsed command to the tracker. Returns a Result."""
    command = args.command

    if command == "add-language":
        return tracker.add_language(args.title)
    if command == "rename-language":
        return tracker.change_language_title(args.old_title, args.new_title)
    if command == "languages":
        return tracker.get_languages()
    if command == "find-language":
        return tracker.find_language_by_name(args.title)
    if command == "delete-language":
        return tracker.delete_language(args.id)
    if command == "add-topic":
        return tracker.add_topic(TopicPayload(title=args.title, closed=args.closed), args.language)
    if command == "update-topic":
        return tracker.update_topic(args.id, TopicPayload(title=args.title, closed=args.closed))
    if command == "set-status":
        return tracker.update_topic_status(args.id, args.status == "closed")
    if command == "delete-topic":
        return tracker.delete_topic(args.id)
    if command == "topics":
        if args.language is not None:
            return tracker.get_topics_by_language(args.language)
        return tracker.get_topics_by_status(args.status == "closed")
    if command == "search":
        return tracker.search_topics(args.query)
    if command == "stats":
        if args.export:
            exported = tracker.export_statistics(args.output_dir)
            print(f"Statistics table: {exported.unwrap()}", file=sys.stderr)
        return tracker.get_language_statistics()

    raise ValueError(f"Unknown command: {command}")


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        tracker = TopicTracker(
            data_root=args.data_root,
            strict_rename=args.strict_rename,
            strict_topic_update=args.strict_topic_update
        )
        result = run_command(tracker, args)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        sys.exit(1)

    except OSError as e:
        logger.error(f"Storage failure: {e}", exc_info=True)
        print(f"Storage failure: {e}", file=sys.stderr)
        sys.exit(1)

    if result.is_failure:
        print(f"Error: {result.unwrap_error().message}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(_to_json(result.unwrap()), indent=2, ensure_ascii=False))
    sys.exit(0)


if __name__ == "__main__":
    main()
