"""Planificación de chunks de un payload"""

from typing import Iterator

from vault_upload.shared.models import ChunkRange


def plan_chunks(total_size: int, max_chunk_size: int) -> Iterator[ChunkRange]:
    """
    Generador que divide [0, total_size) en rangos contiguos

    Cada rango cubre min(max_chunk_size, bytes restantes). Un payload vacío
    no produce ningún rango: se pasa directo al commit.

    Yields:
        ChunkRange en orden creciente de offset
    """
    if max_chunk_size < 1:
        raise ValueError(f"max_chunk_size debe ser positivo (actual: {max_chunk_size})")
    if total_size < 0:
        raise ValueError(f"total_size no puede ser negativo (actual: {total_size})")

    offset = 0
    while offset < total_size:
        last_byte = min(offset + max_chunk_size, total_size) - 1
        yield ChunkRange(offset=offset, last_byte=last_byte, total_size=total_size)
        offset = last_byte + 1


def count_chunks(total_size: int, max_chunk_size: int) -> int:
    """Cantidad de rangos que produce plan_chunks"""
    return -(-total_size // max_chunk_size)
