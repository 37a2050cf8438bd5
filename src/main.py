"""
CLI Huffman compressor:
Usage example:
  py src/main.py compress -i file.bin -o file.hf --stats --verbose
  py src/main.py decompress -i file.hf -o file.bin
  py src/main.py info -i file.hf
  py src/main.py verify -i file.hf

debug: 1 - summary in log, 4 - log every code.
"""

# =================================================================================================================

import logging
import sys

import cli

from Huff_Formats import HuffException

# =================================================================================================================

def main(argv=None) -> int:

    parser = cli.init()
    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return 0

    verbose = getattr(args, "verbose", False) or getattr(args, "debug", 0) > 0
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not cli.input_exists(args):
        print(f"[ERROR] File not found: {args.input}", file=sys.stderr)
        return 2

    try:
        args.func(args)
    except HuffException as e:
        print(f"[ERROR] {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    return 0

# =================================================================================================================

if __name__ == "__main__":
    sys.exit(main())
