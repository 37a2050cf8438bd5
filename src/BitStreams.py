from __future__ import annotations
from typing import BinaryIO, List, Optional

"""Битовые потоки ввода/вывода.

Все операции работают MSB-first: старший бит байта читается/пишется первым.

API:
    - BitInputStream: чтение по width бит, reset() для повторного прохода.
    - BitOutputStream: запись по width бит, close() дописывает неполный байт нулями.
    - byte_to_bits / bits_to_bytes / bytes_to_bits: преобразования в список битов.
"""

_MAX_WIDTH = 32

# =================================================================================================================

def byte_to_bits(bits: List[int], value: int, length: int):
    """Добавляет в битовый буфер length младших бит числа value (старшие первыми).

    Args:
        bits (List[int]): Целевой буфер битов.
        value (int): Число, из которого извлекаются биты.
        length (int): Количество записываемых бит.
    """
    for i in range(length - 1, -1, -1):
        bits.append((value >> i) & 1)

def bits_to_bytes(bits: List[int]) -> bytes:
    """Упаковывает список битов в байты, неполный последний байт дополняется нулями."""
    out = bytearray((len(bits) + 7) // 8)
    for i, bit in enumerate(bits):
        if bit:
            out[i // 8] |= 1 << (7 - i % 8)
    return bytes(out)

def bytes_to_bits(data: bytes) -> List[int]:
    bits: List[int] = []
    for byte in data:
        byte_to_bits(bits, byte, 8)
    return bits

# =================================================================================================================

class BitInputStream:
    """Читает биты из буфера в памяти.

    Исчерпание данных возвращается как None, а не как значение из диапазона [0, 2^width).
    """

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._total = len(self._data) * 8
        self._pos = 0
        self.bits_read = 0

    @classmethod
    def from_file(cls, path: str) -> "BitInputStream":
        with open(path, "rb") as f:
            return cls(f.read())

    def read_bits(self, width: int) -> Optional[int]:
        """Читает width бит.

        Args:
            width (int): Количество бит (1..32).

        Returns:
            Optional[int]: значение или None, если осталось меньше width бит.
                           При неполном чтении позиция не сдвигается.
        """
        if not 0 < width <= _MAX_WIDTH:
            raise ValueError(f"width must be in 1..{_MAX_WIDTH}, got {width}")

        if self._pos + width > self._total:
            return None

        value = 0
        pos = self._pos
        remaining = width
        while remaining > 0:
            byte = self._data[pos >> 3]
            offset = pos & 7                            # уже прочитанные биты текущего байта
            take = min(remaining, 8 - offset)
            chunk = (byte >> (8 - offset - take)) & ((1 << take) - 1)
            value = (value << take) | chunk
            pos += take
            remaining -= take

        self._pos = pos
        self.bits_read += width
        return value

    def reset(self):
        self._pos = 0

# =================================================================================================================

class BitOutputStream:
    """Накапливает биты в байты и сбрасывает целые байты в sink.

    Если sink не передан, результат доступен через getvalue().
    """

    def __init__(self, sink: Optional[BinaryIO] = None):
        self._sink = sink
        self._buffer = bytearray()
        self._acc = 0                   # накопленные биты неполного байта
        self._acc_len = 0
        self._closed = False
        self.bits_written = 0

    def write_bits(self, width: int, value: int):
        """Дописывает width младших бит числа value, старшие первыми."""
        if self._closed:
            raise ValueError("write to closed BitOutputStream")
        if not 0 < width <= _MAX_WIDTH:
            raise ValueError(f"width must be in 1..{_MAX_WIDTH}, got {width}")

        self._acc = (self._acc << width) | (value & ((1 << width) - 1))
        self._acc_len += width
        self.bits_written += width

        while self._acc_len >= 8:
            self._acc_len -= 8
            self._buffer.append((self._acc >> self._acc_len) & 0xFF)
        self._acc &= (1 << self._acc_len) - 1

        if self._sink is not None and len(self._buffer) >= 1 << 16:
            self._flush()

    def close(self):
        """Дополняет последний байт нулями и сбрасывает всё в sink."""
        if self._closed:
            return
        if self._acc_len > 0:
            self._buffer.append((self._acc << (8 - self._acc_len)) & 0xFF)
            self._acc = 0
            self._acc_len = 0
        self._flush()
        self._closed = True

    def getvalue(self) -> bytes:
        if self._sink is not None:
            raise ValueError("getvalue() is available only without sink")
        return bytes(self._buffer)

    @property
    def closed(self) -> bool:
        return self._closed

    def _flush(self):
        if self._sink is None:
            return
        self._sink.write(bytes(self._buffer))
        self._buffer.clear()
