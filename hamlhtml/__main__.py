import argparse
import logging
import sys
import time
from pathlib import Path

from .compiler import HamlCompiler, TranspileOptions, convert
from .config import load_config
from .errors import HamlConfigError
from .samples import SAMPLE_HAML
from .watcher import run_watcher, trigger_recompile

RELOAD_DELAY = 3


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
                        prog='hamlhtml',
                        description='Convert HAML-style indented markup to HTML',
                        epilog='Use --config to watch and rebuild files listed in a YAML config')
    parser.add_argument('source', nargs='?', help="HAML file to convert ('-' for stdin)")
    parser.add_argument('-o', '--output', help='write HTML here instead of stdout')
    parser.add_argument('--no-format', dest='format_output', action='store_false',
                        help='keep source indentation instead of re-indenting')
    parser.add_argument('--self-closing', dest='self_closing_mode', default='xhtml',
                        choices=['xhtml', 'html5', 'html4'])
    parser.add_argument('--indent', dest='indent_unit', type=int, default=2)
    parser.add_argument('--sample', action='store_true', help='convert the bundled sample document')
    parser.add_argument('-c', '--config', help='YAML config for watch mode')
    parser.add_argument('--once', action='store_true', help='with --config, build once and exit')
    args = parser.parse_args(argv)
    if not (args.source or args.sample or args.config):
        parser.error('one of source, --sample or --config is required')
    return args


def _read_source(args) -> str:
    if args.sample:
        return SAMPLE_HAML
    if args.source == '-':
        return sys.stdin.read()
    with open(args.source, "r") as f:
        return f.read()


def convert_file(args) -> int:
    try:
        options = TranspileOptions(args.format_output, args.self_closing_mode, args.indent_unit)
        source = _read_source(args)
    except (HamlConfigError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = convert(source, options)
    if not result.ok:
        # Leave any existing output file untouched
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    if args.output:
        Path(args.output).write_text(result.output + '\n')
    else:
        print(result.output)
    return 0


def watch(args) -> int:
    if args.once:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(message)s',
                            datefmt='%Y-%m-%d %H:%M:%S')
        try:
            cfg = load_config(args.config)
        except HamlConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        written = trigger_recompile(cfg.write_pairs, HamlCompiler(cfg.options))
        return 0 if written == len(cfg.write_pairs) else 1

    while True:
        try:
            run_watcher(load_config(args.config))
            return 0
        except HamlConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            print(f"Please check your configuration and try again, attempting to reload in {RELOAD_DELAY} seconds...",
                  file=sys.stderr)
            time.sleep(RELOAD_DELAY)


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.config:
        return watch(args)
    logging.basicConfig(level=logging.WARNING, format='%(levelname)s: %(message)s')
    return convert_file(args)


if __name__ == '__main__':
    sys.exit(main())
