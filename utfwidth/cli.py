"""
utfwidth - measure and convert Unicode text from the command line

Usage:
    utfwidth width [TEXT ...]
    utfwidth convert --from ENC --to ENC [--policy POLICY] [INPUT]

Examples:
    utfwidth width "你好" "👩🏼‍🚀"                        # prints 4 and 2
    utfwidth convert --from utf-8 --to utf-16 in.txt     # UTF-16 to stdout
"""

import argparse
import logging
import sys
from array import array
from typing import BinaryIO, TextIO

from utfwidth import __version__
from utfwidth.errors import UnicodeException
from utfwidth.policy import ErrorPolicy
from utfwidth.router import Encoding, default_router
from utfwidth.width import CONTROL_WIDTH, width

logger = logging.getLogger("utfwidth.cli")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_USAGE = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments

    Args:
        argv: Arguments to parse, defaults to sys.argv[1:]

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="utfwidth",
        description="Convert between Unicode encodings and measure terminal width",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  utfwidth width "Hello, World!"                      # 13
  echo "中国人" | utfwidth width                       # 6
  utfwidth convert --from utf-16 --to utf-8 in.bin    # decode UTF-16 to stdout
        """,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"utfwidth {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    width_parser = subparsers.add_parser(
        "width", help="Print the display width of each text (or stdin line)"
    )
    width_parser.add_argument("text", nargs="*", help="Text to measure")

    convert_parser = subparsers.add_parser(
        "convert", help="Convert raw code units from one encoding to another"
    )
    convert_parser.add_argument(
        "--from",
        dest="source",
        required=True,
        help="Source encoding: utf-8, utf-16, utf-32, narrow or wide",
    )
    convert_parser.add_argument(
        "--to",
        dest="destination",
        required=True,
        help="Destination encoding: utf-8, utf-16, utf-32, narrow or wide",
    )
    convert_parser.add_argument(
        "--policy",
        choices=[policy.value for policy in ErrorPolicy],
        default=ErrorPolicy.USE_REPLACEMENT_CHARACTER.value,
        help="What to do with invalid input (default: replace)",
    )
    convert_parser.add_argument(
        "--byteorder",
        choices=["little", "big"],
        default=sys.byteorder,
        help="Byte order of 16 and 32 bit code units (default: native)",
    )
    convert_parser.add_argument(
        "input", nargs="?", default=None, help="Input file (default: stdin)"
    )

    return parser.parse_args(argv)


def units_from_bytes(data: bytes, encoding: Encoding, byteorder: str) -> bytes | array:
    """Split raw bytes into the code units of ``encoding``."""
    empty = default_router.cast(b"", encoding)
    if isinstance(empty, bytes):
        return data
    if len(data) % empty.itemsize:
        raise UnicodeException(
            f"Input length {len(data)} is not a multiple of {empty.itemsize} bytes"
        )
    empty.frombytes(data)
    if byteorder != sys.byteorder:
        empty.byteswap()
    return empty


def units_to_bytes(units: bytes | array, byteorder: str) -> bytes:
    if isinstance(units, bytes):
        return units
    if byteorder != sys.byteorder:
        units = array(units.typecode, units)
        units.byteswap()
    return units.tobytes()


def run_width(texts: list[str], stdin: TextIO, stdout: TextIO) -> int:
    if not texts:
        texts = [line.rstrip("\r\n") for line in stdin]

    status = EXIT_OK
    for text in texts:
        columns = width(text)
        if columns == CONTROL_WIDTH:
            logger.warning("Control character in %r, width is undefined", text)
            status = EXIT_INVALID
        print(columns, file=stdout)
    return status


def run_convert(args: argparse.Namespace, stdin: BinaryIO, stdout: BinaryIO) -> int:
    source = Encoding.lookup(args.source)
    destination = Encoding.lookup(args.destination)

    if args.input:
        with open(args.input, "rb") as input_file:
            data = input_file.read()
    else:
        data = stdin.read()

    units = units_from_bytes(data, source, args.byteorder)
    result = default_router.convert(units, source, destination, args.policy)
    stdout.write(units_to_bytes(result.value, args.byteorder))
    stdout.flush()

    if not result:
        logger.warning("Input is not valid %s (policy: %s)", source.value, args.policy)
        return EXIT_INVALID
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI"""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        if args.command == "width":
            return run_width(args.text, sys.stdin, sys.stdout)
        return run_convert(args, sys.stdin.buffer, sys.stdout.buffer)
    except (UnicodeException, OSError) as error:
        logger.error("%s", error)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
