"""Configuración centralizada de logging"""

import logging
import logging.config

from vault_upload.core.config import config


def setup_logging(level=None):
    """Configura el logging para toda la aplicación"""
    level = level or config.log_level

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "simple" if config.log_format == "simple" else "detailed",
            "stream": "ext://sys.stderr",
        },
    }
    if config.log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "detailed",
            "filename": config.log_file,
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
        }

    log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "simple": {"format": "%(levelname)s - %(message)s"},
        },
        "handlers": handlers,
        "loggers": {
            "vault_upload": {
                "level": level,
                "handlers": list(handlers),
                "propagate": False,
            },
            "httpx": {"level": "WARNING"},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }

    logging.config.dictConfig(log_config)
