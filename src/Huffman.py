from __future__ import annotations
import logging
from dataclasses import dataclass
from heapq import heappush, heappop
from typing import Dict, List, Union

from BitStreams import BitInputStream, BitOutputStream
from Huff_Formats import *

"""Кодек Хаффмана с деревом в заголовке.

Поддерживает:
    - подсчёт частот байтов с принудительной частотой 1 для PSEUDO_EOF
    - построение дерева Хаффмана по частотам (минимальная куча)
    - сериализацию дерева в битовый заголовок и обратное восстановление
    - кодирование/декодирование потока с завершающим кодом PSEUDO_EOF

Формат см. Huff_Formats.

API:
    - HuffProcessor(debug): класс с методами compress/decompress над битовыми потоками.
    - compress_bytes / decompress_bytes / describe: обёртки для данных в памяти.
"""

log = logging.getLogger(__name__)

# =================================================================================================================

@dataclass(frozen=True)
class Leaf:
    symbol: int
    weight: int = 0

@dataclass(frozen=True)
class Internal:
    weight: int
    left: "Node"
    right: "Node"

Node = Union[Leaf, Internal]

def is_leaf(node: Node) -> bool:
    return isinstance(node, Leaf)

def leaves(root: Node) -> List[Leaf]:
    """Листья дерева слева направо, включая повторяющиеся символы."""
    result: List[Leaf] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if is_leaf(node):
            result.append(node)
        else:
            stack.append(node.right)
            stack.append(node.left)
    return result

def write_code(out: BitOutputStream, code: str):
    """Пишет код из '0'/'1' частями не длиннее BITS_PER_INT: коды бывают длиннее 32 бит."""
    for i in range(0, len(code), BITS_PER_INT):
        chunk = code[i:i + BITS_PER_INT]
        out.write_bits(len(chunk), int(chunk, 2))

# =================================================================================================================

class HuffProcessor:
# -------------------------------------------------------------------------------------------------

    def __init__(self, debug: int = 0):
        """
        Args:
            debug (int): уровень подробности журнала (0, DEBUG_LOW, DEBUG_HIGH).
                         На результат не влияет.
        """
        self.debug = debug

# -------------------------------------------------------------------------------------------------

    def compress(self, inp: BitInputStream, out: BitOutputStream):
        """Сжимает поток. Вход читается дважды: подсчёт частот и кодирование.

        Args:
            inp (BitInputStream): исходные данные, должен поддерживать reset().
            out (BitOutputStream): выход, закрывается по завершении.
        """
        counts = self.read_for_counts(inp)
        root = self.make_tree_from_counts(counts)
        codings = self.make_codings_from_tree(root)

        out.write_bits(BITS_PER_INT, HUFF_TREE)
        self.write_header(root, out)
        header_bits = out.bits_written

        inp.reset()
        self.write_compressed_bits(codings, inp, out)
        out.close()

        if self.debug >= DEBUG_LOW:
            log.debug("compress: %d symbols, header %d bits, total %d bits",
                      len(codings), header_bits, out.bits_written)

    def decompress(self, inp: BitInputStream, out: BitOutputStream):
        """Восстанавливает исходные данные.

        Raises:
            UnrecognizedFormatError: magic не совпадает с HUFF_TREE.
            MalformedHeaderError: заголовок обрезан или повреждён.
            TruncatedStreamError: поток закончился раньше PSEUDO_EOF.
        """
        root = self.read_container_header(inp)
        self.read_compressed_bits(root, inp, out)
        out.close()

        if self.debug >= DEBUG_LOW:
            log.debug("decompress: read %d bits, wrote %d bytes",
                      inp.bits_read, out.bits_written // BITS_PER_WORD)

# -------------------------------------------------------------------------------------------------

    def read_for_counts(self, inp: BitInputStream) -> List[int]:
        """Подсчитывает частоты байтов, затем перематывает вход в начало.

        Returns:
            List[int]: частоты символов 0..PSEUDO_EOF, freq[PSEUDO_EOF] == 1.
        """
        freq = [0] * (ALPH_SIZE + 1)
        while True:
            ch = inp.read_bits(BITS_PER_WORD)
            if ch is None:
                break
            freq[ch] += 1

        freq[PSEUDO_EOF] = 1
        inp.reset()

        if self.debug >= DEBUG_LOW:
            log.debug("counts: %d distinct symbols", sum(1 for f in freq if f))
        return freq

    def make_tree_from_counts(self, counts: List[int]) -> Node:
        """Строит дерево Хаффмана по таблице частот.

        Элемент кучи: (вес, уникальный_счётчик, узел). Листья добавляются
        по возрастанию символа, поэтому равные веса разрешаются порядком вставки.
        """
        heap = []
        uniq_id = 0

        for sym, w in enumerate(counts):
            if w == 0:
                continue
            heappush(heap, (w, uniq_id, Leaf(sym, w)))
            uniq_id += 1

        # Пустой вход: остался только PSEUDO_EOF, добавляем лист-заглушку с весом 0,
        # чтобы у каждого символа был код длины >= 1
        if len(heap) == 1:
            present = heap[0][2].symbol
            placeholder = 0 if present != 0 else 1
            heappush(heap, (0, uniq_id, Leaf(placeholder, 0)))
            uniq_id += 1

        while len(heap) > 1:
            w1, _, left = heappop(heap)
            w2, _, right = heappop(heap)

            heappush(heap, (w1 + w2, uniq_id, Internal(w1 + w2, left, right)))
            uniq_id += 1

        _, _, root = heap[0]
        return root

    def make_codings_from_tree(self, root: Node) -> Dict[int, str]:
        """Строит таблицу кодов обходом в глубину: '0' - влево, '1' - вправо."""
        encodings: Dict[int, str] = {}

        def dfs(node: Node, path: str):
            if is_leaf(node):           # базовый случай
                encodings[node.symbol] = path
            else:
                dfs(node.left, path + "0")
                dfs(node.right, path + "1")

        dfs(root, "")

        if self.debug >= DEBUG_HIGH:
            for sym in sorted(encodings):
                log.debug("code %3d -> %s", sym, encodings[sym])
        return encodings

# -------------------------------------------------------------------------------------------------

    def write_header(self, node: Node, out: BitOutputStream):
        """Пишет дерево в прямом порядке: лист = 1 + 9 бит значения, узел = 0 + левое + правое."""
        if is_leaf(node):
            out.write_bits(1, 1)
            out.write_bits(LEAF_VALUE_BITS, node.symbol)
        else:
            out.write_bits(1, 0)
            self.write_header(node.left, out)
            self.write_header(node.right, out)

    def read_tree_header(self, inp: BitInputStream, depth: int = 0) -> Node:
        """Читает дерево в прямом порядке.

        Args:
            inp (BitInputStream): вход, позиция сразу после magic.
            depth (int): глубина текущего узла; корректное дерево из 257 листьев
                         не глубже PSEUDO_EOF.
        """
        if depth > PSEUDO_EOF:
            raise MalformedHeaderError(f"tree header deeper than {PSEUDO_EOF} levels")

        bit = inp.read_bits(1)
        if bit is None:
            raise MalformedHeaderError("unexpected end of input in tree header")

        if bit == 0:
            left = self.read_tree_header(inp, depth + 1)
            right = self.read_tree_header(inp, depth + 1)
            return Internal(left.weight + right.weight, left, right)

        value = inp.read_bits(LEAF_VALUE_BITS)
        if value is None:
            raise MalformedHeaderError("unexpected end of input in leaf value")
        if value > PSEUDO_EOF:
            raise MalformedHeaderError(f"leaf value {value} out of alphabet")
        return Leaf(value)

    def read_container_header(self, inp: BitInputStream) -> Node:
        """Проверяет magic, читает дерево и проверяет, что его можно декодировать.

        Raises:
            UnrecognizedFormatError: magic не совпадает с HUFF_TREE.
            MalformedHeaderError: заголовок обрезан, дерево из одного листа или без PSEUDO_EOF.
        """
        magic = inp.read_bits(BITS_PER_INT)
        if magic is None:
            raise MalformedHeaderError("input too short for magic number")
        if magic != HUFF_TREE:
            raise UnrecognizedFormatError(f"illegal header starts with {magic:#010x}")

        root = self.read_tree_header(inp)
        if is_leaf(root):
            raise MalformedHeaderError("tree header must contain at least two leaves")
        if not any(leaf.symbol == PSEUDO_EOF for leaf in leaves(root)):
            raise MalformedHeaderError("tree header has no PSEUDO_EOF leaf")
        return root

# -------------------------------------------------------------------------------------------------

    def write_compressed_bits(self, codings: Dict[int, str], inp: BitInputStream, out: BitOutputStream):
        """Заменяет каждый байт его кодом и завершает поток кодом PSEUDO_EOF."""
        while True:
            value = inp.read_bits(BITS_PER_WORD)
            if value is None:
                break
            write_code(out, codings[value])

        write_code(out, codings[PSEUDO_EOF])

    def read_compressed_bits(self, root: Node, inp: BitInputStream, out: BitOutputStream):
        """Спуск по дереву бит за битом до листа PSEUDO_EOF."""
        current = root
        while True:
            bit = inp.read_bits(1)
            if bit is None:
                raise TruncatedStreamError("bad input, no PSEUDO_EOF")

            current = current.right if bit else current.left

            if is_leaf(current):
                if current.symbol == PSEUDO_EOF:
                    break
                out.write_bits(BITS_PER_WORD, current.symbol)
                current = root

# =================================================================================================================

def compress_bytes(data: bytes, debug: int = 0) -> bytes:
    out = BitOutputStream()
    HuffProcessor(debug).compress(BitInputStream(data), out)
    return out.getvalue()

def decompress_bytes(data: bytes, debug: int = 0) -> bytes:
    out = BitOutputStream()
    HuffProcessor(debug).decompress(BitInputStream(data), out)
    return out.getvalue()

def describe(data: bytes) -> HeaderInfo:
    """Разбирает только magic и заголовок дерева, не декодируя данные.

    Args:
        data (bytes): сжатый файл целиком.

    Returns:
        HeaderInfo: сводка по заголовку и таблица кодов.
    """
    inp = BitInputStream(data)
    proc = HuffProcessor()

    root = proc.read_container_header(inp)
    codes = proc.make_codings_from_tree(root)

    return HeaderInfo(
        magic       = HUFF_TREE,
        header_bits = inp.bits_read - BITS_PER_INT,
        leaf_count  = len(leaves(root)),
        depth       = max(len(c) for c in codes.values()),
        codes       = codes,
    )
