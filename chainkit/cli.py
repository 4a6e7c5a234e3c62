#!/usr/bin/env python3
"""
ChainKit CLI
============
Command-line interface for training and sampling text chains.

Usage:
    chainkit train corpus.txt -u model.json --order 2
    chainkit generate model.json -n 5 --seed 42
    chainkit info model.json
    chainkit formats
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from chainkit import __version__
from chainkit.formats import CODECS, codec_for_path, load_chain, save_chain
from chainkit.errors import ChainError
from chainkit.sampling import RandomSource
from chainkit.settings import get_setting
from chainkit.text import TextChain

logger = logging.getLogger(__name__)


# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.console = Console(highlight=False)
        self.err_console = Console(stderr=True, highlight=False)

    def print(self, *args, **kwargs):
        if not self.quiet:
            self.console.print(*args, markup=False, soft_wrap=True, **kwargs)

    def emit(self, text: str):
        """Print a result line, even in quiet mode."""
        self.console.print(text, markup=False, soft_wrap=True)

    def error(self, msg: str):
        self.err_console.print(f"Error: {msg}", markup=False, soft_wrap=True)

    def success(self, msg: str):
        if not self.quiet:
            self.console.print(f"OK: {msg}", markup=False, soft_wrap=True)

    def table(self, headers: list, rows: list, title: str = None):
        """Print a formatted table."""
        if self.quiet:
            return
        table = Table(title=title)
        for header in headers:
            table.add_column(str(header))
        for row in rows:
            table.add_row(*(str(c) for c in row))
        self.console.print(table)


def configure_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else get_setting('logging.level', 'WARNING')
    logging.basicConfig(
        level=level,
        format=get_setting('logging.format', '%(levelname)s %(name)s: %(message)s'),
    )


def known_extensions() -> str:
    return ' '.join(ext for codec in CODECS for ext in codec.extensions)


def with_default_extension(path: str) -> str:
    """Append the cli.default_format extension to a path that has none."""
    if Path(path).suffix:
        return path
    return f"{path}.{get_setting('cli.default_format', 'json')}"


# =============================================================================
# Commands
# =============================================================================

def cmd_train(args, out: Output):
    """Train new chain files, or update existing ones, from text inputs."""
    if args.order is not None and args.order < 1:
        out.error("order must be at least 1")
        return 1

    # make sure all the input files exist
    for path in args.inputs:
        if not Path(path).is_file():
            out.error(f"could not find input file `{path}`")
            return 1

    # make sure all chain files have known extensions
    updates = [with_default_extension(path) for path in args.update]
    for path in updates:
        codec_for_path(path)

    # read each input file
    texts = []
    for path in args.inputs:
        try:
            texts.append(Path(path).read_text(encoding='utf-8'))
        except UnicodeDecodeError as e:
            out.error(f"could not read `{path}`: {e}")
            return 1

    chains = []
    for path in updates:
        if Path(path).exists():
            out.print(f"Loading {path}")
            chain = load_chain(path, chain_class=TextChain)
            if args.order is not None and chain.order != args.order:
                out.error(
                    f"chain file `{path}` has a chain with order {chain.order}, "
                    f"but {args.order} was specified on the command line"
                )
                return 1
        else:
            order = args.order or get_setting('chain.default_order', 1)
            out.print(f"{path} does not exist, it will be created")
            chain = TextChain(order)
        chains.append((path, chain))

    for path, chain in chains:
        out.print(f"Training {path}")
        for text in texts:
            chain.train_text(text)
        out.print(f"Writing {path}")
        save_chain(chain, path)
        logger.info(f"Saved {chain!r} to {path}")

    out.success(f"trained {len(chains)} chain(s) on {len(texts)} input(s)")
    return 0


def cmd_generate(args, out: Output):
    """Generate text from a chain file."""
    max_length = args.max_length
    if max_length is None:
        max_length = get_setting('cli.default_max_length')
    if max_length is not None and max_length < 0:
        out.error(f"max length must be at least 0, got {max_length}")
        return 1
    if args.count < 0:
        out.error(f"count must be at least 0, got {args.count}")
        return 1

    chain = load_chain(args.model, chain_class=TextChain)
    rng = RandomSource(seed=args.seed)

    for _ in range(args.count):
        if args.sentences:
            text = chain.generate_sentence(rng=rng, max_length=max_length)
        else:
            text = chain.generate_text(max_length=max_length, rng=rng)
        out.emit(text)
    return 0


def cmd_info(args, out: Output):
    """Show statistics about a chain file."""
    chain = load_chain(args.model, chain_class=TextChain)
    codec = codec_for_path(args.model)

    rows = [
        ['Format', codec.name],
        ['Order', chain.order],
        ['Contexts', len(chain)],
        ['Start contexts', len(chain.start_keys())],
        ['Transitions', chain.total_weight()],
    ]
    out.table(['Property', 'Value'], rows, title=str(args.model))
    return 0


def cmd_formats(args, out: Output):
    """List supported chain file formats."""
    rows = [[' '.join(f'.{ext}' for ext in codec.extensions), codec.description]
            for codec in CODECS]
    out.table(['Extensions', 'Format'], rows)
    return 0


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='chainkit',
        description='ChainKit - N-gram Markov chain trainer and generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
The file format of a chain is determined by its extension.
Known extensions: {known_extensions()}

Examples:
  %(prog)s train corpus.txt -u model.json --order 2
  %(prog)s generate model.json -n 5 --seed 42
  %(prog)s generate model.yaml --sentences -n 3
  %(prog)s info model.json
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- train ---
    p = subparsers.add_parser('train', aliases=['t'], help='Train or update chain files from text')
    p.add_argument('inputs', nargs='+', metavar='INPUT', help='Training text files')
    p.add_argument('-u', '--update', nargs='+', required=True, metavar='MODEL',
                   help='Chain files to update or create')
    p.add_argument('-r', '--order', type=int, default=None,
                   help='Order of new chains (default: chain.default_order setting)')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate text from a chain file')
    p.add_argument('model', help='Chain file')
    p.add_argument('-n', '--count', type=int, default=get_setting('cli.default_count', 1),
                   help='Number of texts to generate')
    p.add_argument('--max-length', '-l', type=int, default=None, help='Maximum tokens per text')
    p.add_argument('--seed', type=int, default=None, help='Random seed for reproducible output')
    p.add_argument('--sentences', '-s', action='store_true', help='Generate single sentences')

    # --- info ---
    p = subparsers.add_parser('info', aliases=['i'], help='Show chain file statistics')
    p.add_argument('model', help='Chain file')

    # --- formats ---
    subparsers.add_parser('formats', help='List supported chain file formats')

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose)

    # Handle aliases
    cmd_map = {
        't': 'train',
        'gen': 'generate', 'g': 'generate',
        'i': 'info',
    }
    command = cmd_map.get(args.command, args.command)

    out = Output(quiet=args.quiet)

    commands = {
        'train': cmd_train,
        'generate': cmd_generate,
        'info': cmd_info,
        'formats': cmd_formats,
    }

    handler = commands[command]
    try:
        return handler(args, out)
    except KeyboardInterrupt:
        out.print("\nCancelled.")
        return 130
    except (ChainError, OSError) as e:
        out.error(str(e))
        logger.debug("Command failed", exc_info=True)
        return 1


if __name__ == '__main__':
    sys.exit(main())
