"""
Protocolos e interfaces para el cliente de vault
"""

from abc import ABC, abstractmethod

from vault_upload.shared.models import AuthHeaders, Credentials


class Payload(ABC):
    """Fuente de bytes de solo lectura con tamaño y nombre conocidos"""

    name: str
    size: int

    @abstractmethod
    def read(self, offset: int, last_byte: int) -> bytes:
        """Lee el rango [offset, last_byte] (límite superior inclusivo)"""
        pass


class AuthProvider(ABC):
    """Produce los headers de autenticación de una transferencia"""

    @abstractmethod
    async def obtain_auth_headers(self, credentials: Credentials) -> AuthHeaders:
        """Obtiene los headers; lanza VaultAuthError si falla"""
        pass


class Notifier(ABC):
    """Sink de presentación para el resultado de una subida"""

    @abstractmethod
    def report_success(self, message: str) -> None:
        pass

    @abstractmethod
    def report_error(self, message: str) -> None:
        pass
