"""
Tests de utilidades: ids, escape de nombres, credenciales y payloads
"""

import hashlib
import re

import pytest

from vault_upload.core.exceptions import VaultValidationError
from vault_upload.shared.models import AuthHeaders, Credentials
from vault_upload.shared.payload import BytesPayload, FilePayload
from vault_upload.shared.utils import (
    escape_filename,
    format_bytes,
    generate_content_id,
    hash_password,
    validate_credentials,
)


def test_formato_del_content_id():
    """Test: 32 hex en mayúsculas con los nibbles de versión y variante"""
    for _ in range(500):
        content_id = generate_content_id()

        assert re.fullmatch(r"[0-9A-F]{32}", content_id)
        assert content_id[12] == "4"
        assert content_id[16] in "89AB"


def test_content_ids_distintos():
    """Test: cada transferencia tiene un id nuevo"""
    ids = {generate_content_id() for _ in range(100)}

    assert len(ids) == 100


@pytest.mark.parametrize(
    "name, expected",
    [
        ("a b#c.txt", "a%20b%23c.txt"),
        ("100%.txt", "100%25.txt"),
        ("%20", "%2520"),
        ("it's!.pdf", "it%27s%21.pdf"),
        ('"$&()*+?', "%22%24%26%28%29%2A%2B%3F"),
        ("plano_v2-final.dwg", "plano_v2-final.dwg"),
        ("año/ñ.txt", "año/ñ.txt"),
    ],
)
def test_escape_filename(name, expected):
    """Test: solo se escapan los caracteres del conjunto fijo"""
    assert escape_filename(name) == expected


def test_hash_password_md5():
    """Test: el password se envía como MD5 hex"""
    assert hash_password("innovator") == hashlib.md5(b"innovator").hexdigest()


def test_format_bytes():
    """Test: formato legible de tamaños"""
    assert format_bytes(512) == "512.00 B"
    assert format_bytes(25000) == "24.41 KB"


def test_validate_credentials_ok():
    """Test: credenciales completas y URL normalizada"""
    credentials = validate_credentials("http://srv/Innovator/", "db", "admin", "hash")

    assert credentials.server_url == "http://srv/Innovator"
    assert credentials.database == "db"


@pytest.mark.parametrize(
    "fields, message",
    [
        ((None, "db", "admin", "hash"), "URL"),
        (("http://srv", "", "admin", "hash"), "base de datos"),
        (("http://srv", "db", None, "hash"), "usuario"),
        (("http://srv", "db", "admin", ""), "password"),
    ],
)
def test_validate_credentials_incompletas(fields, message):
    """Test: cada dato faltante produce un error de validación"""
    with pytest.raises(VaultValidationError, match=message):
        validate_credentials(*fields)


def test_credenciales_inmutables():
    """Test: las credenciales no se modifican una vez validadas"""
    credentials = Credentials(server_url="http://srv", database="db", username="u", password="p")

    with pytest.raises(Exception):
        credentials.username = "otro"

    assert "password" not in repr(credentials)


def test_auth_headers_extend_no_muta():
    """Test: extend devuelve una lista nueva con auth primero"""
    headers = AuthHeaders.bearer("tok")

    extended = headers.extend([("transactionid", "TX-1")])
    extended.append(("otro", "x"))

    assert headers.pairs == (("authorization", "Bearer tok"),)
    assert headers.extend([("transactionid", "TX-1")]) == [
        ("authorization", "Bearer tok"),
        ("transactionid", "TX-1"),
    ]


def test_file_payload_lee_rangos(tmp_path):
    """Test: lectura aleatoria de rangos de un archivo"""
    path = tmp_path / "datos.bin"
    path.write_bytes(bytes(range(256)) * 4)

    with FilePayload.open(path) as payload:
        assert payload.name == "datos.bin"
        assert payload.size == 1024
        assert payload.read(1000, 1023) == (bytes(range(256)) * 4)[1000:]
        assert payload.read(0, 0) == b"\x00"


def test_file_payload_inexistente(tmp_path):
    """Test: un archivo inexistente es un error de validación"""
    with pytest.raises(VaultValidationError, match="no encontrado"):
        FilePayload.open(tmp_path / "no-existe.bin")


def test_bytes_payload():
    """Test: payload en memoria"""
    payload = BytesPayload(b"abcdef", "a.txt")

    assert payload.size == 6
    assert payload.read(2, 4) == b"cde"
