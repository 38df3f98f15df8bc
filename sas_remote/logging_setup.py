import json
import logging
import os
import sys
import time
from typing import Any, Dict, Set

from rich.console import Console
from rich.logging import RichHandler

from sas_remote.core.models import Secret

# Two outputs share the same rules:
#   console (default)  - RichHandler on the CLI console
#   --json-logs        - one JSON object per line on stdout
# Root stays at WARNING so saspy / py4j chatter is hidden; "sasr" is INFO.
# Secret values registered here are masked in every rendered record.

MASK = "********"
SENSITIVE_KEYS = frozenset({"secret", "password", "omrpw"})

_LOGRECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

_known_secrets: Set[str] = set()


def register_secret(secret: Secret) -> None:
    """Mask this secret's value wherever it shows up in a log message or traceback."""
    _known_secrets.add(secret.reveal())


def redact(text: str) -> str:
    for value in _known_secrets:
        text = text.replace(value, MASK)
    return text


class SecretFilter(logging.Filter):
    """Rewrites the rendered message of each record with known secrets masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        if _known_secrets:
            record.msg = redact(record.getMessage())
            record.args = ()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "msg": redact(record.getMessage()),
        }

        # extra={...} fields
        for key, value in record.__dict__.items():
            if key in _LOGRECORD_ATTRS or key.startswith("_"):
                continue
            if isinstance(value, Secret) or key.lower() in SENSITIVE_KEYS:
                value = MASK
            payload.setdefault(key, value)

        if record.exc_info:
            payload["exc_info"] = redact(self.formatException(record.exc_info))

        return json.dumps(payload, ensure_ascii=False, default=str)


def _levels(verbose: bool):
    if verbose:
        return "INFO", "DEBUG"
    return (
        os.environ.get("SASR_ROOT_LOG_LEVEL", "WARNING").upper(),
        os.environ.get("SASR_APP_LOG_LEVEL", "INFO").upper(),
    )


def _install(handler: logging.Handler, verbose: bool) -> None:
    root_level, app_level = _levels(verbose)
    handler.addFilter(SecretFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)
    root.addHandler(handler)

    logging.getLogger("sasr").setLevel(app_level)


def setup_console_logging(console: Console, verbose: bool = False) -> None:
    """Route log records through a RichHandler on the given console."""
    handler = RichHandler(console=console, rich_tracebacks=True, log_time_format="[%X]")
    _install(handler, verbose)


def setup_json_logging(verbose: bool = False) -> None:
    """
    Emit JSON lines on stdout for log shippers.

    Args:
        verbose: sasr at DEBUG and root at INFO; otherwise SASR_ROOT_LOG_LEVEL /
                 SASR_APP_LOG_LEVEL (defaults WARNING / INFO).
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    _install(handler, verbose)
