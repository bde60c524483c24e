import argparse
import curses

from card_field import __version__
from card_field.app import run_field
from card_field.config import load_config, parse_pattern_arg
from card_field.formatter import GroupFormatter, InvalidPattern


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Grouped card number input field")
    p.add_argument("-v", "--version", action="version",
                   version=f"%(prog)s {__version__}")
    p.add_argument("-c", "--config", default="default",
                   help="Configuration name or path (searches ~/.card-field/configs/, ./configs/, or use full path)")
    p.add_argument("--pattern", default=None,
                   help="Digit group sizes, comma separated (e.g. 4,6,5) - overrides config")
    p.add_argument("-d", "--debug", action="store_true", default=False,
                   help="Log edits and formatting passes to card_field.log in current directory")
    p.add_argument("--format", metavar="TEXT", dest="text", default=None,
                   help="Print TEXT formatted with the group pattern and exit")
    return p


def main(argv=None):
    p = build_parser()
    args = p.parse_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, InvalidPattern) as e:
        p.error(str(e))

    # CLI arguments override config values
    if args.pattern is not None:
        try:
            config.field.group_pattern = parse_pattern_arg(args.pattern)
        except InvalidPattern as e:
            p.error(str(e))

    if args.text is not None:
        print(GroupFormatter(config.field.group_pattern).format(args.text))
        return

    number = curses.wrapper(run_field, config, debug=args.debug)
    if number:
        print(number)
