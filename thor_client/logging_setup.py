"""
ThorClient - Logging System
=============================
Logging strutturato per il client Thor: JSON su file, testo colorato su
stderr, campi strutturati via `extra_data`.

Security Level: HIGH
Last Updated: 2026-10-17
Version: 1.0.0

Regole:
- Id transazione, indirizzi e revision si loggano sempre.
- Chiavi private, seed e firme raw MAI: i campi sensibili in extra_data
  vengono mascherati da RedactingFilter prima di qualsiasi handler.
- stdout resta riservato all'output della CLI.
"""

import json
import logging
import logging.handlers
import sys
import time
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from thor_client.constants import CLIENT_NAME, SOFTWARE_VERSION


ROOT_LOGGER_NAME = "thorclient"

# Campi extra_data mai scritti in chiaro
SENSITIVE_FIELDS = frozenset({
    "private_key",
    "privkey",
    "secret",
    "seed",
    "mnemonic",
    "password",
})

REDACTED = "***"

# Logger rumorosi delle dipendenze HTTP (requests -> urllib3)
NOISY_LOGGERS = ("urllib3", "urllib3.connectionpool")


def _redact(data: Any) -> Any:
    if isinstance(data, dict):
        return {
            key: REDACTED if str(key).lower() in SENSITIVE_FIELDS else _redact(value)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [_redact(item) for item in data]
    return data


# ============================================================================
# FILTERS
# ============================================================================

class RedactingFilter(logging.Filter):
    """Maschera i campi sensibili di extra_data (ricorsivo)"""

    def filter(self, record: logging.LogRecord) -> bool:
        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            record.extra_data = _redact(extra_data)
        return True


# ============================================================================
# FORMATTERS
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    Una riga JSON per record:

    {"ts": "...Z", "level": "INFO", "logger": "thorclient.transactions",
     "msg": "Transaction submitted", "client": "ThorClient/1.0.0",
     "data": {"id": "0x..."}, "error": {...}}
    """

    def __init__(self, include_traceback: bool = True):
        super().__init__()
        self.include_traceback = include_traceback

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "client": f"{CLIENT_NAME}/{SOFTWARE_VERSION}",
            "where": f"{record.module}:{record.lineno}",
        }

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            entry["data"] = extra_data

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            error = {"type": exc_type.__name__, "message": str(exc_value)}
            # ThorClientException: code/details strutturati
            code = getattr(exc_value, "code", None)
            if code:
                error["code"] = code
            if self.include_traceback:
                error["traceback"] = traceback.format_exception(exc_type, exc_value, exc_tb)
            entry["error"] = error

        return json.dumps(entry, default=str)


class ColoredTextFormatter(logging.Formatter):
    """Console: `HH:MM:SS LEVEL logger: msg key=value ...`"""

    LEVEL_COLORS = {
        "DEBUG": "\033[90m",
        "INFO": "\033[92m",
        "WARNING": "\033[93m",
        "ERROR": "\033[91m",
        "CRITICAL": "\033[1;91m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_colors and level in self.LEVEL_COLORS:
            level = f"{self.LEVEL_COLORS[level]}{level:<7}{self.RESET}"

        clock = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%H:%M:%S")
        category = record.name[len(ROOT_LOGGER_NAME) + 1:] or record.name
        line = f"{clock} {level} {category}: {record.getMessage()}"

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            line += " " + " ".join(f"{key}={value}" for key, value in extra_data.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# ============================================================================
# LOGGER
# ============================================================================

class ThorClientLogger:
    """
    Wrapper sottile su logging.Logger: ogni metodo accetta `extra_data`.
    """

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    @property
    def name(self) -> str:
        return self._logger.name

    def is_debug(self) -> bool:
        return self._logger.isEnabledFor(logging.DEBUG)

    def _log(self, level: int, message: str, extra_data: Optional[Dict[str, Any]], exc_info=None):
        self._logger.log(
            level,
            message,
            exc_info=exc_info,
            extra={"extra_data": dict(extra_data)} if extra_data else None,
        )

    def debug(self, message: str, extra_data: Optional[Dict[str, Any]] = None):
        self._log(logging.DEBUG, message, extra_data)

    def info(self, message: str, extra_data: Optional[Dict[str, Any]] = None):
        self._log(logging.INFO, message, extra_data)

    def warning(self, message: str, extra_data: Optional[Dict[str, Any]] = None):
        self._log(logging.WARNING, message, extra_data)

    def error(self, message: str, extra_data: Optional[Dict[str, Any]] = None, exc_info=None):
        self._log(logging.ERROR, message, extra_data, exc_info)


# ============================================================================
# SETUP
# ============================================================================

def setup_logging(
    log_level: str = "INFO",
    log_to_file: bool = False,
    log_dir: Path = Path("./logs"),
    log_format: str = "json",
    max_file_mb: int = 10,
    backup_count: int = 5,
    enable_console: bool = True,
) -> ThorClientLogger:
    """
    Configura il logger radice `thorclient`.

    Idempotente: gli handler precedenti vengono chiusi e rimossi, quindi la
    CLI può richiamarla a ogni invocazione.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR, CRITICAL
        log_to_file: Scrive anche su `<log_dir>/thorclient.log` (rotating)
        log_dir: Directory dei file di log
        log_format: Formato del file, "json" o "text"
        max_file_mb: Dimensione massima prima della rotation
        backup_count: File ruotati mantenuti
        enable_console: Testo colorato su stderr

    Returns:
        ThorClientLogger: Logger radice configurato
    """
    level = getattr(logging, log_level.upper())

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)

    redactor = RedactingFilter()

    if log_to_file:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / f"{ROOT_LOGGER_NAME}.log",
            maxBytes=max_file_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(
            JSONFormatter() if log_format == "json" else ColoredTextFormatter(use_colors=False)
        )
        file_handler.addFilter(redactor)
        root.addHandler(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(ColoredTextFormatter(use_colors=sys.stderr.isatty()))
        console_handler.addFilter(redactor)
        root.addHandler(console_handler)

    # urllib3 logga ogni connessione a DEBUG: solo warning salvo debug esplicito
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)

    return ThorClientLogger(root)


def get_logger(category: str) -> ThorClientLogger:
    """
    Logger per categoria: `get_logger("signing")` -> `thorclient.signing`.
    """
    return ThorClientLogger(logging.getLogger(f"{ROOT_LOGGER_NAME}.{category}"))


# ============================================================================
# TIMING
# ============================================================================

class PerformanceLogger:
    """
    Misura la durata di una richiesta al nodo.

    Sotto soglia logga a DEBUG, sopra soglia a WARNING. Se il blocco
    solleva, la durata viene loggata con l'esito "failed" e l'eccezione
    prosegue.

    Example:
        >>> with PerformanceLogger(logger, "POST /transactions", threshold_ms=5000):
        ...     session.request(...)
    """

    def __init__(self, logger: ThorClientLogger, operation: str, threshold_ms: Optional[int] = None):
        self.logger = logger
        self.operation = operation
        self.threshold_ms = threshold_ms
        self.elapsed_ms: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self):
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = round((time.perf_counter() - self._started) * 1000, 2)
        extra = {
            "operation": self.operation,
            "duration_ms": self.elapsed_ms,
            "outcome": "failed" if exc_type else "ok",
        }

        if self.threshold_ms and self.elapsed_ms > self.threshold_ms:
            self.logger.warning(f"Slow node request: {self.operation}", extra_data=extra)
        else:
            self.logger.debug(f"Node request: {self.operation}", extra_data=extra)
        return False


__all__ = [
    "setup_logging",
    "get_logger",
    "ThorClientLogger",
    "PerformanceLogger",
    "RedactingFilter",
    "JSONFormatter",
    "ColoredTextFormatter",
    "SENSITIVE_FIELDS",
]
