"""
Módulo compartido con modelos, utilidades y protocolos del cliente de vault
"""

# Modelos
from vault_upload.shared.models import (
    AuthHeaders,
    BeginTransactionResponse,
    ChunkRange,
    CommitResult,
    Credentials,
    OAuthDiscovery,
    OpenIDConfiguration,
    TokenResponse,
    TransferState,
)

# Utilidades
from vault_upload.shared.utils import (
    escape_filename,
    format_bytes,
    generate_content_id,
    hash_password,
    validate_credentials,
)

# Protocolos
from vault_upload.shared.protocols import (
    AuthProvider,
    Notifier,
    Payload,
)

# Payloads
from vault_upload.shared.payload import BytesPayload, FilePayload

__all__ = [
    # Models
    "AuthHeaders",
    "BeginTransactionResponse",
    "ChunkRange",
    "CommitResult",
    "Credentials",
    "OAuthDiscovery",
    "OpenIDConfiguration",
    "TokenResponse",
    "TransferState",
    # Utils
    "escape_filename",
    "format_bytes",
    "generate_content_id",
    "hash_password",
    "validate_credentials",
    # Protocols
    "AuthProvider",
    "Notifier",
    "Payload",
    # Payloads
    "BytesPayload",
    "FilePayload",
]
