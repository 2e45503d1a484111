"""Logging centralizado (structlog sobre el módulo `logging` estándar).

Los registros se escriben en stderr para que stdout solo lleve resultados de
consultas, lo que mantiene la CLI usable en pipelines de shell.
"""

from __future__ import annotations

import logging
import secrets
import sys
from typing import Any, Iterable

import structlog

LOG_FORMATS = {"console", "json"}

_UID_SEPARATOR = ":"


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def setup_logging(level: str = "WARNING", format_type: str = "console") -> None:
    """Configura structlog y el logger raíz.

    Args:
        level: Nombre del nivel raíz (DEBUG, INFO, WARNING, ERROR).
        format_type: "console" para salida legible, "json" para líneas JSON.
    """

    if format_type not in LOG_FORMATS:
        raise ValueError(f"unknown log format: {format_type}")

    renderer: Any
    if format_type == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # sys.stderr vigente en el momento de configurar.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())


def resolve_log_level(level: str, verbose: bool = False) -> str:
    """Nivel a configurar; el modo verbose lo baja al menos a INFO."""

    name = level.upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        raise ValueError(f"unknown log level: {level}")
    if verbose and numeric > logging.INFO:
        return "INFO"
    return name


def get_logger(name: str | None = None) -> Any:
    """Devuelve un logger de structlog asociado a `name`."""

    return structlog.get_logger(name)


def _new_uid() -> str:
    return secrets.token_hex(10)


class RequestLogger:
    """Logger asociado a una cadena de uids de request.

    La cadena de uids es el id de correlación que acompaña a los eventos de
    uso enviados; un logger hijo conserva los uids del padre y añade el suyo.
    """

    def __init__(self, name: str | None = None, uids: Iterable[str] | None = None) -> None:
        self._name = name
        self._uids = list(uids) if uids else [_new_uid()]
        self._logger = get_logger(name).bind(req_uids=self.get_serialized_uids())

    def get_uids(self) -> list[str]:
        return list(self._uids)

    def get_serialized_uids(self) -> str:
        return _UID_SEPARATOR.join(self._uids)

    def new_request_logger(self) -> "RequestLogger":
        """Crea un logger hijo cuya cadena de uids extiende esta."""

        return RequestLogger(self._name, [*self._uids, _new_uid()])

    def debug(self, event: str, **kwargs: Any) -> None:
        self._logger.debug(event, **kwargs)

    def info(self, event: str, **kwargs: Any) -> None:
        self._logger.info(event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._logger.warning(event, **kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        self._logger.error(event, **kwargs)
