"""
Cuerpo multipart del commit y lectura de su respuesta
"""

import json
import logging
from email.parser import BytesParser
from email.policy import HTTP
from typing import List, Tuple

import httpx
from pydantic import ValidationError

from vault_upload.core.exceptions import VaultCommitError, VaultProtocolError
from vault_upload.shared.models import CommitResult

logger = logging.getLogger(__name__)

# Es importante usar \r\n; con \n el servidor rechaza el commit
EOL = "\r\n"

# Relación Located fija que exige el servidor
LOCATED_RELATED_ID = "67BBB9204FE84A8981ED8313049BA06C"


def commit_boundary(content_id: str) -> str:
    """El id es aleatorio por transferencia, así que no aparece en el JSON"""
    return f"batch_{content_id}"


def build_commit_body(
    boundary: str,
    server_url: str,
    content_id: str,
    file_name: str,
    file_size: int,
) -> bytes:
    """
    Arma el cuerpo multipart/mixed del commit.

    Contiene una única parte application/http con el POST que crea el
    item File en el servidor.
    """
    payload = json.dumps(
        {
            "id": content_id,
            "filename": file_name,
            "file_size": file_size,
            "Located": [{"file_version": 1, "related_id": LOCATED_RELATED_ID}],
        },
        separators=(",", ":"),
        ensure_ascii=False,
    )

    lines = [
        f"--{boundary}",
        "Content-Type: application/http",
        "",
        f"POST {server_url}/Server/odata/File HTTP/1.1",
        "Content-Type: application/json",
        "",
        payload,
        f"--{boundary}--",
    ]
    return EOL.join(lines).encode("utf-8")


def commit_headers(boundary: str, transaction_id: str) -> List[Tuple[str, str]]:
    return [
        ("Content-Type", f"multipart/mixed; boundary={boundary}"),
        ("transactionid", transaction_id),
    ]


def parse_commit_response(
    response: httpx.Response, transaction_id: str, content_id: str
) -> CommitResult:
    """
    Lee el item File devuelto por el commit.

    El servidor puede responder JSON plano o un batch multipart cuya parte
    es una respuesta HTTP embebida con el JSON.
    """
    content_type = response.headers.get("content-type", "").lower()

    if content_type.startswith("multipart/"):
        body = _extract_embedded_body(response, transaction_id, content_id)
    else:
        body = response.content

    try:
        return CommitResult.model_validate_json(body)
    except ValidationError as e:
        raise VaultProtocolError(f"Respuesta de commit inválida: {e}") from e


def _extract_embedded_body(
    response: httpx.Response, transaction_id: str, content_id: str
) -> bytes:
    content_type = response.headers["content-type"]
    message = BytesParser(policy=HTTP).parsebytes(
        f"Content-Type: {content_type}\r\n\r\n".encode("latin-1") + response.content
    )

    for part in message.iter_parts():
        embedded = part.get_payload(decode=True) or b""
        if part.get_content_type() != "application/http":
            return embedded

        head, _, body = embedded.replace(b"\r\n", b"\n").partition(b"\n\n")
        status_line = head.split(b"\n", 1)[0].decode("latin-1").strip()
        status = _parse_status(status_line)
        if status is not None and not 200 <= status < 300:
            raise VaultCommitError(
                f"El servidor rechazó el commit: {status_line}", transaction_id, content_id
            )
        return body.strip()

    raise VaultProtocolError("Respuesta de commit multipart sin partes")


def _parse_status(status_line: str):
    # "HTTP/1.1 201 Created"
    fields = status_line.split(" ", 2)
    if len(fields) >= 2 and fields[1].isdigit():
        return int(fields[1])
    logger.warning(f"Línea de status inesperada en el commit: {status_line!r}")
    return None
