from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

DEFAULT_IOM_PORT = 8591

# Applied before every submission, in order
DEFAULT_SUBMIT_OPTIONS: Tuple[str, ...] = (
    "options validvarname=any;",  # allow non-conforming column names in input data
    "options pagesize=max;",      # no page breaks in the log/listing
)


@dataclass(frozen=True)
class SubmitConfig:
    port: int = DEFAULT_IOM_PORT
    report_interval_seconds: float = 60
    chunk_size: int = 1000             # lines per drain call
    backend: str = "iom"
    submit_options: Tuple[str, ...] = DEFAULT_SUBMIT_OPTIONS
    java_path: str = "java"            # IOM backend talks to the server through a JVM bridge
    saspy_cfgname: Optional[str] = None
    source_encoding: str = "utf-8"     # SAS programs are often latin-1 / cp1252

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SubmitConfig":
        """
        Build a config from SASR_* environment variables, falling back to defaults.

        Raises:
            ValueError: If a numeric variable is not an integer
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            port=_int_env(env, "SASR_PORT", defaults.port),
            report_interval_seconds=_int_env(env, "SASR_REPORT_INTERVAL", defaults.report_interval_seconds),
            chunk_size=_int_env(env, "SASR_CHUNK_SIZE", defaults.chunk_size),
            backend=env.get("SASR_BACKEND", defaults.backend),
            java_path=env.get("SASR_JAVA", defaults.java_path),
            saspy_cfgname=env.get("SASR_SASPY_CFGNAME") or None,
            source_encoding=env.get("SASR_SOURCE_ENCODING") or defaults.source_encoding,
        )


def _int_env(env: Mapping[str, str], name: str, default):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
