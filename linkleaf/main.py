"""
Main entry point for linkleaf.
Command-line front end over the feed repository.
"""
import argparse
import logging
import sys
from json.decoder import JSONDecodeError
from typing import List, Optional

from linkleaf.atomic_store import AtomicStore
from linkleaf.config_manager import ConfigManager
from linkleaf.exceptions import FeedError, FeedValidationError
from linkleaf.feed_repository import FeedRepository, list_links
from linkleaf.utils.formatting import format_dump, format_listing
from linkleaf.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

DESCRIPTION = """linkleaf - protobuf feed manager (linkleaf.v1)

Data is stored only in protobuf binary files (.pb). "add" prepends links
(newest first); without --id the id is sha256(url|date)[:12]. "init" always
replaces the file; "add" creates it on demand."""


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog='linkleaf',
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--config', type=str, default=None, help='Path to a JSON settings file')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    init_parser = subparsers.add_parser('init', help='Create (or replace) a feed file')
    init_parser.add_argument('file', help='Protobuf feed file (.pb)')
    init_parser.add_argument('--title', default=None, help='Feed title')
    init_parser.add_argument('--version', type=int, default=None, help='Feed version')

    add_parser = subparsers.add_parser('add', help='Prepend a link to a feed')
    add_parser.add_argument('--file', default=None, help='Protobuf feed file (.pb)')
    add_parser.add_argument('--title', required=True, help='Link title')
    add_parser.add_argument('--url', required=True, help='Link URL')
    add_parser.add_argument('--date', required=True, help='YYYY-MM-DD')
    add_parser.add_argument('--summary', default='', help='Short summary')
    add_parser.add_argument('--tags', default='', help='Comma-separated tags (e.g. a,b,c)')
    add_parser.add_argument('--via', default='', help='Optional attribution URL')
    add_parser.add_argument('--id', default='', help='Stable ID (default: sha256(url|date)[:12])')

    list_parser = subparsers.add_parser('list', help='List links in a feed')
    list_parser.add_argument('file', help='Protobuf feed file (.pb)')

    print_parser = subparsers.add_parser('print', help='Dump a feed as key/value text')
    print_parser.add_argument('file', help='Protobuf feed file (.pb)')

    export_parser = subparsers.add_parser('export', help='Write the editable JSON form of a feed')
    export_parser.add_argument('file', help='Protobuf feed file (.pb)')
    export_parser.add_argument('-o', '--output', default=None, help='Output JSON file (default: stdout)')

    import_parser = subparsers.add_parser('import', help='Replace a feed with the contents of a JSON file')
    import_parser.add_argument('source', help='JSON feed file')
    import_parser.add_argument('file', help='Protobuf feed file (.pb)')

    return parser.parse_args(argv)


def cmd_init(args: argparse.Namespace, repository: FeedRepository, config_manager: ConfigManager) -> None:
    title = args.title if args.title is not None else config_manager.get_config_value("feed.default_title", "")
    version = args.version if args.version is not None else config_manager.get_config_value("feed.default_version", 1)

    repository.create(args.file, title=title, version=version)
    print(f'initialized {args.file} (version={version}, title="{title}")')


def cmd_add(args: argparse.Namespace, repository: FeedRepository, config_manager: ConfigManager) -> None:
    path = args.file or config_manager.get_config_value("feed.default_path")
    link_fields = {
        'title': args.title,
        'url': args.url,
        'date': args.date,
        'summary': args.summary,
        'tags': args.tags,
        'via': args.via,
    }

    _, link_id = repository.append(path, link_fields, explicit_id=args.id)
    print(f"added [{link_id}] {args.title}")


def cmd_list(args: argparse.Namespace, repository: FeedRepository, config_manager: ConfigManager) -> None:
    feed = repository.load(args.file)
    sys.stdout.write(format_listing(feed, list_links(feed)))


def cmd_print(args: argparse.Namespace, repository: FeedRepository, config_manager: ConfigManager) -> None:
    feed = repository.load(args.file)
    sys.stdout.write(format_dump(feed))


def cmd_export(args: argparse.Namespace, repository: FeedRepository, config_manager: ConfigManager) -> None:
    data = repository.export_text(args.file)

    if args.output:
        repository.store.write(args.output, data)
        print(f"exported {args.file} -> {args.output}")
    else:
        sys.stdout.write(data.decode('utf-8'))


def cmd_import(args: argparse.Namespace, repository: FeedRepository, config_manager: ConfigManager) -> None:
    data = repository.store.read(args.source)
    feed = repository.import_text(args.file, data)
    print(f"imported {args.source} -> {args.file} ({len(feed.links)} links)")


COMMANDS = {
    'init': cmd_init,
    'add': cmd_add,
    'list': cmd_list,
    'print': cmd_print,
    'export': cmd_export,
    'import': cmd_import,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = parse_arguments(argv)

    try:
        config_manager = ConfigManager(settings_path=args.config)
    except (OSError, JSONDecodeError, TypeError, ValueError) as e:
        print(f"error: invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE

    log_level = 'DEBUG' if args.debug else config_manager.get_config_value("logging.level", "WARNING")
    setup_logging(log_level=log_level, log_dir=config_manager.get_config_value("logging.log_dir"))

    store = AtomicStore(file_mode=config_manager.get_file_mode(), dir_mode=config_manager.get_dir_mode())
    repository = FeedRepository(store=store)

    try:
        COMMANDS[args.command](args, repository, config_manager)
    except FeedValidationError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except FeedError as e:
        logger.debug(f"Command '{args.command}' failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
