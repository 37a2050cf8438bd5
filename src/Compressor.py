# Compressor.py

# =================================================================================================================

from __future__ import annotations
import logging
import os
import tempfile

from BitStreams import BitInputStream, BitOutputStream
from Huffman import HuffProcessor, compress_bytes, decompress_bytes

# =================================================================================================================

log = logging.getLogger(__name__)

# =================================================================================================================

def _atomic_write(path: str, run) -> None:
    """Пишет файл через временный файл в той же директории и os.replace.

    Args:
        path (str): итоговый путь.
        run (Callable[[BinaryIO], None]): заполняет открытый на запись файл.
    """
    dir_path = os.path.dirname(os.path.abspath(path))  # Обрезка названия файла
    name = os.path.basename(path)                       # Выделение названия файла
    os.makedirs(dir_path, exist_ok=True)

    fd, tmp = tempfile.mkstemp(dir=dir_path, prefix=name + ".tmp_")
    os.close(fd)
    try:
        with open(tmp, "wb") as f:
            run(f)
        os.replace(tmp, path)
    except BaseException:
        os.remove(tmp)
        raise

def _stats(inp: BitInputStream, out: BitOutputStream, original: int, compressed: int) -> dict:
    return {
        "original_size":    original,
        "compressed_size":  compressed,
        "bits_read":        inp.bits_read,
        "bits_written":     out.bits_written,
        "ratio":            compressed / original if original else 0.0,
    }

# =================================================================================================================

def compress_file(src: str, dst: str, debug: int = 0) -> dict:
    """Сжимает файл src в dst.

    Returns:
        dict:
        - original_size (int): размер исходного файла
        - compressed_size (int): размер сжатого файла
        - bits_read (int): прочитано бит (два прохода)
        - bits_written (int): записано бит без учёта выравнивания
        - ratio (float): compressed_size / original_size
    """
    inp = BitInputStream.from_file(src)
    holder = {}

    def run(f):
        out = BitOutputStream(f)
        HuffProcessor(debug).compress(inp, out)
        holder["out"] = out

    _atomic_write(dst, run)

    stats = _stats(inp, holder["out"], os.path.getsize(src), os.path.getsize(dst))
    log.info("compressed %s -> %s (%d -> %d bytes)",
             src, dst, stats["original_size"], stats["compressed_size"])
    return stats

def decompress_file(src: str, dst: str, debug: int = 0) -> dict:
    """Распаковывает файл src в dst. Формат словаря как у compress_file,
    original_size - размер восстановленного файла."""
    inp = BitInputStream.from_file(src)
    holder = {}

    def run(f):
        out = BitOutputStream(f)
        HuffProcessor(debug).decompress(inp, out)
        holder["out"] = out

    _atomic_write(dst, run)

    stats = _stats(inp, holder["out"], os.path.getsize(dst), os.path.getsize(src))
    log.info("decompressed %s -> %s (%d bytes)", src, dst, stats["original_size"])
    return stats

def verify_file(src: str) -> bool:
    """Распаковывает в память и сжимает повторно; True, если результат совпал с файлом."""
    with open(src, "rb") as f:
        data = f.read()

    restored = decompress_bytes(data)
    return compress_bytes(restored) == data

# End of module
