"""Implementaciones de Payload: archivo en disco y bytes en memoria"""

import os
from pathlib import Path
from typing import BinaryIO, Optional, Union

from vault_upload.core.exceptions import VaultValidationError
from vault_upload.shared.protocols import Payload


class FilePayload(Payload):
    """
    Archivo local con acceso aleatorio.

    Se usa como context manager para mantener el descriptor abierto
    durante toda la transferencia:

        with FilePayload.open("plano.pdf") as payload:
            await client.upload(payload, credentials)
    """

    def __init__(self, handle: BinaryIO, name: str, size: int):
        self._handle = handle
        self.name = name
        self.size = size

    @classmethod
    def open(cls, path: Union[str, Path], name: Optional[str] = None) -> "FilePayload":
        file_path = Path(path)
        if not file_path.is_file():
            raise VaultValidationError(f"Archivo no encontrado: {path}")

        handle = open(file_path, "rb")
        size = os.fstat(handle.fileno()).st_size
        return cls(handle, name or file_path.name, size)

    def read(self, offset: int, last_byte: int) -> bytes:
        self._handle.seek(offset)
        return self._handle.read(last_byte - offset + 1)

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> "FilePayload":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class BytesPayload(Payload):
    """Contenido en memoria"""

    def __init__(self, data: bytes, name: str):
        self._data = bytes(data)
        self.name = name
        self.size = len(self._data)

    def read(self, offset: int, last_byte: int) -> bytes:
        return self._data[offset:last_byte + 1]
