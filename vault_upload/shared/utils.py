"""
Utilidades compartidas para el cliente de vault
"""
import hashlib
import uuid
from typing import Optional

from vault_upload.core.exceptions import VaultValidationError
from vault_upload.shared.models import Credentials

# Orden importante: '%' primero para no re-escapar los escapes
_ESCAPED_CHARS = (
    ("%", "%25"),
    (" ", "%20"),
    ("'", "%27"),
    ("!", "%21"),
    ('"', "%22"),
    ("#", "%23"),
    ("$", "%24"),
    ("&", "%26"),
    ("(", "%28"),
    (")", "%29"),
    ("*", "%2A"),
    ("+", "%2B"),
    ("?", "%3F"),
)


def generate_content_id() -> str:
    """
    Genera un id de 32 caracteres hexadecimales en mayúsculas.

    El caracter 12 siempre es '4' y el 16 uno de 8, 9, A o B.
    """
    return uuid.uuid4().hex.upper()


def escape_filename(name: str) -> str:
    """Escapa solo los caracteres que rompen el parámetro filename*="""
    for char, replacement in _ESCAPED_CHARS:
        name = name.replace(char, replacement)
    return name


def hash_password(password: str) -> str:
    """Calcula el MD5 del password como lo espera el servidor"""
    return hashlib.md5(password.encode("utf-8")).hexdigest()


def format_bytes(bytes_value: int) -> str:
    """Formatea bytes en formato legible"""
    value = float(bytes_value)
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if value < 1024.0:
            return f"{value:.2f} {unit}"
        value /= 1024.0
    return f"{value:.2f} PB"


def validate_credentials(
    server_url: Optional[str],
    database: Optional[str],
    username: Optional[str],
    password: Optional[str],
) -> Credentials:
    """
    Verifica que cada dato de conexión tenga valor.

    Args:
        server_url: URL del servidor Innovator
        database: Nombre de la base de datos
        username: Usuario
        password: Password ya hasheado

    Raises:
        VaultValidationError: Si falta alguno de los datos
    """
    if not server_url:
        raise VaultValidationError("Ingrese la URL del servidor.")
    if not database:
        raise VaultValidationError("Ingrese el nombre de la base de datos.")
    if not username:
        raise VaultValidationError("Ingrese un nombre de usuario.")
    if not password:
        raise VaultValidationError("Ingrese un password.")

    return Credentials(
        server_url=server_url, database=database, username=username, password=password
    )
