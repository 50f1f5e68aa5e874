"""Modelos de datos compartidos para el cliente de vault"""

from enum import Enum
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TransferState(str, Enum):
    """Estado de una transferencia"""

    NOT_STARTED = "not_started"
    AUTHENTICATING = "authenticating"
    TRANSACTION_OPEN = "transaction_open"
    UPLOADING = "uploading"
    COMMITTING = "committing"
    COMMITTED = "committed"
    FAILED = "failed"


class Credentials(BaseModel):
    """
    Datos de conexión del usuario.

    El password llega ya hasheado; el núcleo nunca lo hashea.
    """

    model_config = ConfigDict(frozen=True)

    server_url: str
    database: str
    username: str
    password: str = Field(repr=False)

    @field_validator("server_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class AuthHeaders(BaseModel):
    """Conjunto ordenado de headers de autenticación"""

    model_config = ConfigDict(frozen=True)

    pairs: Tuple[Tuple[str, str], ...]

    @classmethod
    def bearer(cls, token: str) -> "AuthHeaders":
        return cls(pairs=(("authorization", f"Bearer {token}"),))

    @classmethod
    def basic(cls, credentials: Credentials) -> "AuthHeaders":
        return cls(
            pairs=(
                ("AUTHUSER", credentials.username),
                ("AUTHPASSWORD", credentials.password),
                ("DATABASE", credentials.database),
            )
        )

    def extend(self, extra: Iterable[Tuple[str, str]] = ()) -> List[Tuple[str, str]]:
        """Devuelve una lista nueva: headers de auth seguidos de los extra"""
        return list(self.pairs) + list(extra)


class ChunkRange(BaseModel):
    """Rango de bytes de un chunk, con el límite superior inclusivo"""

    model_config = ConfigDict(frozen=True)

    offset: int = Field(ge=0)
    last_byte: int = Field(ge=0)
    total_size: int = Field(gt=0)

    @model_validator(mode="after")
    def check_bounds(self) -> "ChunkRange":
        if not self.offset <= self.last_byte < self.total_size:
            raise ValueError(
                f"Rango inválido: {self.offset}-{self.last_byte}/{self.total_size}"
            )
        return self

    @property
    def length(self) -> int:
        return self.last_byte - self.offset + 1

    @property
    def content_range(self) -> str:
        return f"bytes {self.offset}-{self.last_byte}/{self.total_size}"


class CommitResult(BaseModel):
    """Item File registrado por el commit"""

    id: str
    filename: str


# Esquemas de respuesta del servidor


class OAuthLocation(BaseModel):
    uri: str


class OAuthDiscovery(BaseModel):
    """Response de OAuthServerDiscovery.aspx"""

    locations: List[OAuthLocation] = Field(min_length=1)


class OpenIDConfiguration(BaseModel):
    """Response de .well-known/openid-configuration"""

    token_endpoint: str


class TokenResponse(BaseModel):
    """Response del token endpoint"""

    access_token: str
    token_type: Optional[str] = None
    expires_in: Optional[int] = None


class BeginTransactionResponse(BaseModel):
    """Response de vault.BeginTransaction"""

    transaction_id: str = Field(alias="transactionId", min_length=1)
