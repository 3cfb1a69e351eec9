"""Inference backend factory: resolves the backend named in config."""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any

from medintake.inference.protocols import IInferenceBackend
from medintake.inference.realtime import RealTimeBackend

if TYPE_CHECKING:
    from medintake.core.config import AppSettings

log = logging.getLogger(__name__)


def _import_dotted_path(dotted: str) -> Any:
    """Import ``module.path:ClassName`` or ``module.path.attr``."""
    if ":" in dotted:
        module_path, obj_name = dotted.rsplit(":", 1)
    elif "." in dotted:
        module_path, obj_name = dotted.rsplit(".", 1)
    else:
        return importlib.import_module(dotted)

    mod = importlib.import_module(module_path)
    return getattr(mod, obj_name)


def create_inference_backend(settings: AppSettings) -> IInferenceBackend:
    """Create the inference backend selected by ``settings.llm.inference_backend``.

    ``"realtime"`` returns the built-in :class:`RealTimeBackend`.  A dotted
    path such as ``mypackage.backends:GatewayBackend`` is imported and
    instantiated with ``settings``.

    Raises:
        ImportError: If the dotted-path module cannot be imported.
        AttributeError: If the module has no such attribute.
        TypeError: If the resolved object is not callable.
    """
    backend_spec = settings.llm.inference_backend

    if backend_spec == "realtime":
        log.info("Using built-in RealTimeBackend")
        return RealTimeBackend()

    log.info("Loading external inference backend: %s", backend_spec)
    cls = _import_dotted_path(backend_spec)

    if not callable(cls):
        raise TypeError(
            f"Inference backend {backend_spec!r} resolved to {cls!r}, "
            "which is not callable"
        )

    return cls(settings)
