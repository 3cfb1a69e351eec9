"""Pluggable inference backend layer.

Usage::

    from medintake.inference import IInferenceBackend, create_inference_backend

    backend = create_inference_backend(settings)
    result = await backend.infer(messages, model="gpt-4o", temperature=0.1)
"""

from __future__ import annotations

from medintake.inference.factory import create_inference_backend
from medintake.inference.protocols import IInferenceBackend, InferenceResult
from medintake.inference.realtime import RealTimeBackend

__all__ = [
    "IInferenceBackend",
    "InferenceResult",
    "RealTimeBackend",
    "create_inference_backend",
]
