#!/usr/bin/env python3

import argparse
import logging
import sys
import textwrap

import requests

from . import commands, __version__
from .pngexceptions import PngException


logger = logging.getLogger("pngme")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pngme",
        description="Hide messages in PNG files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""
        examples:
          pngme encode cover.png RuSt "meet me at noon" secret.png
          pngme decode secret.png RuSt
          pngme remove secret.png RuSt
          pngme print https://example.com/image.png
        """),
    )
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    parser.add_argument("-v", "--verbose", action="store_true", help="Log what is going on")

    sub = parser.add_subparsers(dest="command", required=True, help="Command to run")

    # encode
    p = sub.add_parser("encode", help="Hide a message in a new chunk")
    p.add_argument("file_path", help="PNG file (or url) to read")
    p.add_argument("chunk_type", help="Four letters chunk type, e.g. RuSt")
    p.add_argument("message", help="Message to hide")
    p.add_argument("output_file", nargs="?", default=None,
                   help="Where to save the result (default: overwrite file_path)")

    # decode
    p = sub.add_parser("decode", help="Print the message hidden in a chunk")
    p.add_argument("file_path", help="PNG file (or url) to read")
    p.add_argument("chunk_type", help="Four letters chunk type, e.g. RuSt")

    # remove
    p = sub.add_parser("remove", help="Remove a chunk")
    p.add_argument("file_path", help="PNG file to edit in place")
    p.add_argument("chunk_type", help="Four letters chunk type, e.g. RuSt")

    # print
    p = sub.add_parser("print", help="List the chunks of a file")
    p.add_argument("file_path", help="PNG file (or url) to read")

    return parser


def _run(args: argparse.Namespace) -> None:
    if args.command == "encode":
        commands.encode(args.file_path, args.chunk_type, args.message, args.output_file)
    elif args.command == "decode":
        print(commands.decode(args.file_path, args.chunk_type))
    elif args.command == "remove":
        commands.remove(args.file_path, args.chunk_type)
    elif args.command == "print":
        print(commands.print_chunks(args.file_path))


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)
    # basicConfig does nothing when the root logger already has handlers
    logger.setLevel(level)
    try:
        _run(args)
    except (PngException, OSError, requests.RequestException) as e:
        logger.debug("%s failed", args.command, exc_info=True)
        logger.error("%s", e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
