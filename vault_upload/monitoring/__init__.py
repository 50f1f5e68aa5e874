"""
Métricas del cliente de vault
"""

from vault_upload.monitoring.metrics import (
    record_upload_operation,
    record_chunk_write,
    record_http_attempt,
    generate_metrics,
    write_metrics,
    get_metrics_summary,
)

__all__ = [
    "record_upload_operation",
    "record_chunk_write",
    "record_http_attempt",
    "generate_metrics",
    "write_metrics",
    "get_metrics_summary",
]
