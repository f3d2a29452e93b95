"""Reverse Lines — чтение строк файла с конца без загрузки целиком.

Файл читается блоками фиксированного размера от конца к началу; в памяти
держится только незавершённый хвост строки.
"""

import os
from typing import BinaryIO, Final, Iterator

DEFAULT_CHUNK_SIZE: Final[int] = 8192


def iter_lines_reversed(
    fileobj: BinaryIO,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    encoding: str = "utf-8",
) -> Iterator[str]:
    """
    Строки файла в обратном порядке (последняя — первой).

    Окончания строк (\\n, \\r\\n) отбрасываются. Завершающий перевод строки
    в конце файла не порождает пустую строку.

    Args:
        fileobj: файл, открытый в бинарном режиме (seekable)
        chunk_size: размер блока чтения в байтах
        encoding: кодировка строк

    Yields:
        Строки от последней к первой
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    size = fileobj.seek(0, os.SEEK_END)
    if size == 0:
        return

    # Завершающий перевод строки не образует отдельную строку
    fileobj.seek(size - 1)
    position = size - 1 if fileobj.read(1) == b"\n" else size
    tail = b""

    while position > 0:
        read_size = min(chunk_size, position)
        position -= read_size
        fileobj.seek(position)
        chunk = fileobj.read(read_size)

        lines = (chunk + tail).split(b"\n")
        # Левый фрагмент может быть неполным: ждём следующий блок
        tail = lines.pop(0)

        for line in reversed(lines):
            yield line.rstrip(b"\r").decode(encoding)

    yield tail.rstrip(b"\r").decode(encoding)
