# Huff_Formats.py
"""
Huff formats module
Формат сжатого файла и таксономия ошибок

Структура:
0..31    Magic (32 bits)              HUFF_TREE = 0xface8201
32..     TreeHeader (variable)        дерево в прямом обходе: 0 - узел, 1 + 9 бит - лист
...      CodeStream (variable)        коды Хаффмана, завершаются кодом PSEUDO_EOF
...      Padding (0..7 bits)          нули до границы байта

Примечания:
- Заголовок не содержит частот: дерево восстанавливается только по форме и значениям листьев.
- Биты после PSEUDO_EOF всегда являются заполнением и никогда не декодируются.
"""
# =================================================================================================================

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict

# =================================================================================================================

# Alphabet
BITS_PER_WORD           = 8
BITS_PER_INT            = 32
ALPH_SIZE               = 1 << BITS_PER_WORD    # 256
PSEUDO_EOF              = ALPH_SIZE             # 256, вне диапазона байта
LEAF_VALUE_BITS         = BITS_PER_WORD + 1     # 9 бит: байт + PSEUDO_EOF

# Magic
HUFF_NUMBER             = 0xface8200
HUFF_TREE               = HUFF_NUMBER | 1

# Debug levels
DEBUG_LOW               = 1
DEBUG_HIGH              = 4

# =================================================================================================================

class HuffException(Exception):
    """Базовая ошибка формата/декодирования."""

class MalformedHeaderError(HuffException):
    """Заголовок обрезан или повреждён."""

class UnrecognizedFormatError(HuffException):
    """Magic не совпадает с HUFF_TREE."""

class TruncatedStreamError(HuffException):
    """Поток кодов закончился раньше PSEUDO_EOF."""

# =================================================================================================================

@dataclass
class HeaderInfo:
    magic: int                  = HUFF_TREE
    header_bits: int            = 0     # без учёта 32 бит magic
    leaf_count: int             = 0
    depth: int                  = 0
    codes: Dict[int, str]       = field(default_factory=dict)

    def symbol_name(self, symbol: int) -> str:
        if symbol == PSEUDO_EOF:
            return "EOF"
        if 0x20 <= symbol < 0x7F:
            return f"{symbol:#04x} '{chr(symbol)}'"
        return f"{symbol:#04x}"

    def __str__(self) -> str:
        return (
            f"magic={self.magic:#010x} header_bits={self.header_bits} "
            f"leaves={self.leaf_count} depth={self.depth}"
        )

# =================================================================================================================
