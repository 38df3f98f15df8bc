from __future__ import annotations

import logging
from collections.abc import Callable

from sas_remote.config import SubmitConfig
from sas_remote.session.base import SessionBackend

logger = logging.getLogger(__name__)

BackendFactory = Callable[[SubmitConfig], SessionBackend]


# Registry mapping backend names to factory functions
_REGISTRY: dict[str, BackendFactory] = {}


def register_backend(name: str, factory: BackendFactory) -> None:
    """
    Register a session backend factory.

    Args:
        name: Backend name (e.g., "iom")
        factory: Factory function that returns a SessionBackend for a given config
    """
    _REGISTRY[name] = factory


def get_backend_factory(name: str) -> BackendFactory:
    """
    Get backend factory for a given name.

    Raises:
        ValueError: If no backend is registered under that name
    """
    if name in _REGISTRY:
        return _REGISTRY[name]

    available = ", ".join(sorted(_REGISTRY.keys()))
    raise ValueError(f"No session backend registered for '{name}'. Available: {available}")


def available_backends() -> list[str]:
    return sorted(_REGISTRY.keys())


def _iom_factory(cfg: SubmitConfig) -> SessionBackend:
    from sas_remote.session.iom import IOMBackend

    return IOMBackend(java_path=cfg.java_path, cfgname=cfg.saspy_cfgname)


register_backend("iom", _iom_factory)
