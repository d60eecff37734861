import argparse
import logging
from pathlib import Path

from .logging_config import setup_logging
from .reader import dump
from .text import TextFormat

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Dump the segments of a JPEG/JFIF file")
    parser.add_argument("path", help="Path to the JPEG file to dump")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show offsets and lengths, quantization values and Huffman code lengths")
    parser.add_argument("--debug", action="store_true", help="Log every marker found")
    parser.add_argument("--log-file", help="Also write log messages to this file")

    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.debug else logging.WARNING, args.log_file)

    jpeg_path = Path(args.path)
    try:
        dump(jpeg_path, TextFormat(verbose=args.verbose))
    except OSError as e:
        logger.error("Failed to dump %s: %s", jpeg_path, e)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
