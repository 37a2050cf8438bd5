import argparse
import os

from Compressor import compress_file, decompress_file, verify_file
from Huffman import describe

# =================================================================================================================

def init() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Huffman file compressor (tree header + PSEUDO_EOF)"
    )
    sub = parser.add_subparsers(dest="cmd")

    # ------------------------------------------------------------
    # compress
    # ------------------------------------------------------------
    c = sub.add_parser("compress", help="Сжать файл")
    c.add_argument("-i", "--input", required=True)
    c.add_argument("-o", "--output", required=True)
    c.add_argument("--verbose", action="store_true")
    c.add_argument("--stats", action="store_true")
    c.add_argument("--debug", type=int, default=0, help="1 - summary, 4 - every code. Default 0")
    c.set_defaults(func=compress_mode)

    # ------------------------------------------------------------
    # decompress
    # ------------------------------------------------------------
    d = sub.add_parser("decompress", help="Распаковать файл")
    d.add_argument("-i", "--input", required=True)
    d.add_argument("-o", "--output", required=True)
    d.add_argument("--verbose", action="store_true")
    d.add_argument("--stats", action="store_true")
    d.add_argument("--debug", type=int, default=0)
    d.set_defaults(func=decompress_mode)

    # ------------------------------------------------------------
    # info
    # ------------------------------------------------------------
    t = sub.add_parser("info", help="Показать заголовок сжатого файла")
    t.add_argument("-i", "--input", required=True)
    t.set_defaults(func=info_mode)

    # ------------------------------------------------------------
    # verify
    # ------------------------------------------------------------
    v = sub.add_parser("verify", help="Проверить сжатый файл")
    v.add_argument("-i", "--input", required=True)
    v.set_defaults(func=verify_mode)

    return parser

# =================================================================================================================

def compress_mode(args):
    """Сжимает args.input в args.output."""
    if args.verbose:
        print("[compress]", args.input, "->", args.output)

    stats = compress_file(args.input, args.output, args.debug)

    if args.stats:
        print_stats(stats)

def decompress_mode(args):
    """Распаковывает args.input в args.output."""
    if args.verbose:
        print("[decompress]", args.input, "->", args.output)

    stats = decompress_file(args.input, args.output, args.debug)

    if args.stats:
        print_stats(stats)

def info_mode(args):
    """Печатает заголовок и таблицу кодов."""
    print("[info] Analyzing:", args.input)
    with open(args.input, "rb") as f:
        info = describe(f.read())

    print("Header:")
    print(info)

    print("\nCodes:")
    for sym in sorted(info.codes):
        print(f" • {info.symbol_name(sym):<12} {info.codes[sym]}")

def verify_mode(args):
    """Проверяет, что файл распаковывается и сжимается обратно в те же байты."""
    print("[verify]", args.input)
    print("OK:", verify_file(args.input))

def print_stats(stats: dict):
    print("\n=== Statistics ===")
    print(f"Original size:   {stats['original_size']}")
    print(f"Compressed size: {stats['compressed_size']}")
    print(f"Bits read:       {stats['bits_read']}")
    print(f"Bits written:    {stats['bits_written']}")
    print(f"Ratio:           {stats['ratio']:.3f}")

# =================================================================================================================

def input_exists(args) -> bool:
    return os.path.isfile(args.input)
