import asyncio
import logging
import sys
from argparse import SUPPRESS, ArgumentParser
from typing import Optional

from .config import load_config
from .services.categorizer import Categorizer
from .services.organizer import WebLinkOrganizer
from .writers.markdown_writer import write_markdown

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = ArgumentParser(
        description='Organize a list of web links into a categorized markdown directory.'
    )
    parser.add_argument(
        '-c', '--config',
        type=str,
        help='Path to JSON or YAML category configuration file'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        help='Also write a detailed log to this file'
    )
    # --config is also accepted after the subcommand
    common = ArgumentParser(add_help=False)
    common.add_argument('-c', '--config', type=str, default=SUPPRESS,
                        help='Path to JSON or YAML category configuration file')

    commands = parser.add_subparsers(dest='command', required=True)

    process = commands.add_parser('process', parents=[common], help='Process a URL list')
    process.add_argument('-i', '--input', type=str, required=True, help='Input URL file')
    process.add_argument('-o', '--output', type=str, help='Output markdown file')

    add = commands.add_parser('add', parents=[common], help='Add a URL')
    add.add_argument('--url', type=str, required=True, help='URL to add')
    add.add_argument('--category', type=str, help='Category of the URL (suggested when omitted)')
    add.add_argument('-i', '--input', type=str, help='Process this URL file before adding')
    add.add_argument('-o', '--output', type=str, help='Output markdown file')

    fix = commands.add_parser('fix-invalid', parents=[common], help='Fix an invalid URL')
    fix.add_argument('--url', type=str, required=True, help='URL to fix')
    fix.add_argument('--alternate', type=str, help='Alternate URL')
    fix.add_argument('-i', '--input', type=str, help='Process this URL file before fixing')
    fix.add_argument('-o', '--output', type=str, help='Output markdown file')

    return parser.parse_args(argv)


def setup_logging(debug: bool, log_file: Optional[str] = None):
    """Log to the console and, optionally, to a file with timestamps."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(logging.DEBUG)
    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)
    return root_logger


async def handle_command(organizer: WebLinkOrganizer, args) -> str:
    output = args.output or organizer.settings.get('output', 'organized-urls.md')

    if args.command == 'process':
        markdown = await organizer.process_file(args.input)
        write_markdown(markdown, output)
        return 'File processed successfully'

    if args.input:
        await organizer.process_file(args.input)

    if args.command == 'add':
        result = await organizer.add_new_url(args.url, args.category)
        write_markdown(organizer.generate_markdown(), output)
        if not result.added:
            return f"URL already listed; recorded as duplicate under: {result.category}"
        return f"Added URL to category: {result.category}"

    if args.command == 'fix-invalid':
        result = await organizer.handle_invalid_link(args.url, args.alternate)
        if result.success:
            write_markdown(organizer.generate_markdown(), output)
        return result.message

    raise ValueError(f"Unknown command: {args.command}")


async def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.debug, args.log_file)

    try:
        config = load_config(args.config)
        organizer = WebLinkOrganizer(Categorizer(config['categories']), config['settings'])
        message = await handle_command(organizer, args)
    except Exception as e:
        logger.error(f"Error: {e}")
        if args.debug:
            logger.exception("Detailed error information:")
        return 1

    print(message)
    return 0


def run():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
