"""
VialRGB — CLI entry point (argparse).
"""

import argparse
import logging
import sys

from vialrgb.__version__ import __version__
from vialrgb.color import parse_white_point
from vialrgb.config import config_path
from vialrgb.errors import InvalidInput


def _brightness(value):
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid brightness '{value}'")
    if not 0 <= n <= 255:
        raise argparse.ArgumentTypeError(f"brightness must be 0-255, got {n}")
    return n


def _white_point(value):
    try:
        return parse_white_point(value)
    except InvalidInput as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser():
    parser = argparse.ArgumentParser(
        prog="vialctl",
        description="Set RGB color on keyboards running Vial firmware with RGB support",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  vialctl ff00ff\n"
            "  vialctl '#00ff00'\n"
            "  vialctl ff0000 --brightness 80\n"
            "\n"
            f"Config: {config_path()}\n"
            "  Example:\n"
            "    white_point = [200, 255, 230]"
        ),
    )
    parser.add_argument("color", nargs="?", metavar="HEX_COLOR",
                        help="Color as RRGGBB or #RRGGBB")
    parser.add_argument("-b", "--brightness", type=_brightness,
                        help="Override brightness (0-255)")
    parser.add_argument("--no-save", action="store_true",
                        help="Apply without saving to EEPROM (lost on power cycle)")
    parser.add_argument("--white-point", type=_white_point, metavar="R,G,B",
                        help="Color correction, e.g. 200,255,230 (overrides config)")
    parser.add_argument("--scan", action="store_true",
                        help="List raw HID interfaces and exit")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log device probing and retries")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )

    from vialrgb.commands import cmd_scan, cmd_set_color

    if args.scan:
        return cmd_scan()

    if not args.color:
        parser.print_help()
        return 1

    return cmd_set_color(
        args.color,
        brightness=args.brightness,
        persist=not args.no_save,
        white_point=args.white_point,
    )


if __name__ == "__main__":
    sys.exit(main())
