"""
Módulos client del cliente de vault
"""

from vault_upload.client.auth import BasicAuthProvider, OAuthAuthProvider
from vault_upload.client.chunks import plan_chunks
from vault_upload.client.client import VaultClient
from vault_upload.client.commit import build_commit_body, commit_boundary
from vault_upload.client.http import RequestClient
from vault_upload.client.transaction import TransactionCoordinator

__all__ = [
    "BasicAuthProvider",
    "OAuthAuthProvider",
    "plan_chunks",
    "VaultClient",
    "build_commit_body",
    "commit_boundary",
    "RequestClient",
    "TransactionCoordinator",
]
