# tests/test_unit_huffman.py

import sys, os
# Добавляем src/ в путь
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import random
import unittest

from BitStreams import *
from Huffman import *
from Huff_Formats import *


def shape(node):
    """Форма дерева без весов: символ для листа, пара для узла."""
    if is_leaf(node):
        return node.symbol
    return (shape(node.left), shape(node.right))

def counts_from(data: bytes):
    h = HuffProcessor()
    return h.read_for_counts(BitInputStream(data))

# ======================================================================
#                        UNIT TESTS FOR BIT STREAMS
# ======================================================================

class TestBitStreams(unittest.TestCase):

    def test_read_widths(self):
        inp = BitInputStream(b"\xac\xff\x01")
        self.assertEqual(inp.read_bits(1), 1)
        self.assertEqual(inp.read_bits(3), 0b010)
        self.assertEqual(inp.read_bits(9), 0b110011111)
        self.assertEqual(inp.read_bits(11), 0b11100000001)
        self.assertIsNone(inp.read_bits(1))
        self.assertEqual(inp.bits_read, 24)

    def test_short_read_consumes_nothing(self):
        inp = BitInputStream(b"\x80")
        self.assertIsNone(inp.read_bits(9))
        self.assertEqual(inp.read_bits(1), 1)

    def test_reset(self):
        inp = BitInputStream(b"AB")
        self.assertEqual(inp.read_bits(8), 0x41)
        inp.reset()
        self.assertEqual(inp.read_bits(16), 0x4142)

    def test_write_and_pad(self):
        out = BitOutputStream()
        out.write_bits(3, 0b101)
        out.write_bits(9, 0b100000000)
        self.assertEqual(out.getvalue(), b"\xb0")     # только целые байты до close
        out.close()
        self.assertEqual(out.getvalue(), b"\xb0\x00")
        self.assertEqual(out.bits_written, 12)

    def test_write_uses_low_bits(self):
        out = BitOutputStream()
        out.write_bits(4, 0xFA)
        out.write_bits(4, 0x3)
        out.close()
        self.assertEqual(out.getvalue(), b"\xa3")

    def test_write_after_close(self):
        out = BitOutputStream()
        out.close()
        with self.assertRaises(ValueError):
            out.write_bits(1, 1)

    def test_bad_width(self):
        with self.assertRaises(ValueError):
            BitOutputStream().write_bits(0, 0)
        with self.assertRaises(ValueError):
            BitInputStream(b"\x00" * 8).read_bits(33)

    def test_bit_conversion(self):
        bits = []
        byte_to_bits(bits, 0b10101100, 8)
        self.assertEqual(bits, [1,0,1,0,1,1,0,0])
        self.assertEqual(bits_to_bytes(bits), b'\xac')
        self.assertEqual(bytes_to_bits(b'\xac'), bits)
        self.assertEqual(bits_to_bytes([1, 1]), b'\xc0')

# ======================================================================
#                        UNIT TESTS FOR HUFFMAN
# ======================================================================

class TestHuffmanInternals(unittest.TestCase):

    def test_frequency_counting(self):
        inp = BitInputStream(b"AAABBC")
        freq = HuffProcessor().read_for_counts(inp)

        self.assertEqual(len(freq), ALPH_SIZE + 1)
        self.assertEqual(freq[65], 3)  # 'A'
        self.assertEqual(freq[66], 2)  # 'B'
        self.assertEqual(freq[67], 1)  # 'C'
        self.assertEqual(freq[PSEUDO_EOF], 1)
        self.assertEqual(sum(freq), 7)
        # вход перемотан
        self.assertEqual(inp.read_bits(8), 65)

    def test_sentinel_count_always_one(self):
        for data in (b"", b"\x00" * 10, bytes(range(256))):
            self.assertEqual(counts_from(data)[PSEUDO_EOF], 1)

    def test_tree_weights_are_sums(self):
        root = HuffProcessor().make_tree_from_counts(counts_from(b"AAAAABBBCCD"))

        def check(node):
            if is_leaf(node):
                return node.weight
            self.assertEqual(node.weight, check(node.left) + check(node.right))
            return node.weight

        self.assertEqual(check(root), 12)

    def test_aaab_scenario(self):
        h = HuffProcessor()
        counts = counts_from(b"AAAB")
        self.assertEqual((counts[0x41], counts[0x42], counts[PSEUDO_EOF]), (3, 1, 1))

        root = h.make_tree_from_counts(counts)
        codes = h.make_codings_from_tree(root)

        self.assertEqual(sorted(codes), [0x41, 0x42, PSEUDO_EOF])
        self.assertEqual(len(codes[0x41]), 1)
        self.assertEqual(len(codes[0x42]), 2)
        self.assertEqual(len(codes[PSEUDO_EOF]), 2)
        self.assertEqual(codes[0x42][0], codes[PSEUDO_EOF][0])
        self.assertEqual(shape(root), ((0x42, PSEUDO_EOF), 0x41))

    def test_empty_input_tree(self):
        h = HuffProcessor()
        root = h.make_tree_from_counts(counts_from(b""))
        codes = h.make_codings_from_tree(root)

        self.assertFalse(is_leaf(root))
        self.assertEqual(len(codes), 2)
        self.assertIn(PSEUDO_EOF, codes)
        for code in codes.values():
            self.assertGreater(len(code), 0)

    def test_single_repeated_byte_tree(self):
        h = HuffProcessor()
        codes = h.make_codings_from_tree(h.make_tree_from_counts(counts_from(b"z" * 100)))
        self.assertEqual(sorted(codes), [ord("z"), PSEUDO_EOF])
        self.assertEqual(len(codes[ord("z")]), 1)

    def test_codes_prefix_free(self):
        random.seed(7)
        h = HuffProcessor()
        for _ in range(20):
            counts = [random.choice((0, 0, 1, 2, 5, 100, random.randint(1, 10000)))
                      for _ in range(ALPH_SIZE)] + [1]
            codes = list(h.make_codings_from_tree(h.make_tree_from_counts(counts)).values())

            self.assertEqual(len(codes), sum(1 for c in counts if c))
            for i, a in enumerate(codes):
                self.assertGreater(len(a), 0)
                for j, b in enumerate(codes):
                    if i != j:
                        self.assertFalse(b.startswith(a), f"{a} is prefix of {b}")

    def test_deterministic_tie_break(self):
        h = HuffProcessor()
        counts = [1] * (ALPH_SIZE + 1)
        a = h.make_codings_from_tree(h.make_tree_from_counts(counts))
        b = h.make_codings_from_tree(h.make_tree_from_counts(counts))
        self.assertEqual(a, b)

    def test_header_self_consistency(self):
        random.seed(3)
        h = HuffProcessor()
        data = bytes(random.choice(b"abcdefgh\x00\xff") for _ in range(500))
        root = h.make_tree_from_counts(counts_from(data))

        out = BitOutputStream()
        h.write_header(root, out)
        out.close()

        restored = h.read_tree_header(BitInputStream(out.getvalue()))
        self.assertEqual(shape(restored), shape(root))

    def test_header_layout(self):
        h = HuffProcessor()
        root = Internal(2, Leaf(0x41, 1), Leaf(PSEUDO_EOF, 1))
        out = BitOutputStream()
        h.write_header(root, out)
        out.close()

        self.assertEqual(out.bits_written, 1 + 2 * (1 + LEAF_VALUE_BITS))
        bits = bytes_to_bits(out.getvalue())[:out.bits_written]
        self.assertEqual(bits, [0,
                                1, 0,0,1,0,0,0,0,0,1,
                                1, 1,0,0,0,0,0,0,0,0])

    def test_codes_longer_than_32_bits(self):
        h = HuffProcessor()
        fib = [1, 1]
        while len(fib) < 34:
            fib.append(fib[-1] + fib[-2])
        counts = fib + [0] * (ALPH_SIZE - len(fib)) + [1]

        root = h.make_tree_from_counts(counts)
        codes = h.make_codings_from_tree(root)
        self.assertGreater(max(len(c) for c in codes.values()), BITS_PER_INT)

        data = bytes(range(34)) + bytes([0, 33, 1])
        out = BitOutputStream()
        h.write_compressed_bits(codes, BitInputStream(data), out)
        out.close()
        self.assertEqual(out.bits_written, sum(len(codes[b]) for b in data) + len(codes[PSEUDO_EOF]))

        back = BitOutputStream()
        h.read_compressed_bits(root, BitInputStream(out.getvalue()), back)
        self.assertEqual(back.getvalue(), data)

    def test_write_code_chunks(self):
        code = "1" + "0" * 40 + "1"
        out = BitOutputStream()
        write_code(out, code)
        out.close()
        self.assertEqual(out.bits_written, 42)
        self.assertEqual(bytes_to_bits(out.getvalue())[:42], [int(c) for c in code])

    def test_deep_header_rejected(self):
        h = HuffProcessor()
        with self.assertRaises(MalformedHeaderError):
            h.read_tree_header(BitInputStream(b"\x00" * 2000))

    def test_deepest_valid_header_accepted(self):
        # цепочка из 257 листьев: глубина PSEUDO_EOF
        h = HuffProcessor()
        out = BitOutputStream()
        for sym in range(ALPH_SIZE):
            out.write_bits(1, 0)
            out.write_bits(1, 1)
            out.write_bits(LEAF_VALUE_BITS, sym)
        out.write_bits(1, 1)
        out.write_bits(LEAF_VALUE_BITS, PSEUDO_EOF)
        out.close()

        root = h.read_tree_header(BitInputStream(out.getvalue()))
        self.assertEqual(len(leaves(root)), ALPH_SIZE + 1)
        self.assertEqual(len(h.make_codings_from_tree(root)[PSEUDO_EOF]), PSEUDO_EOF)

    def test_debug_level_does_not_change_output(self):
        data = b"debug levels only affect logging"
        with self.assertLogs("Huffman", level="DEBUG") as cm:
            loud = compress_bytes(data, debug=DEBUG_HIGH)
        self.assertEqual(loud, compress_bytes(data))
        self.assertTrue(any("code" in line for line in cm.output))


if __name__ == "__main__":
    unittest.main()
