"""Batch readiness gate and the client-side polling loop around it."""

from __future__ import annotations

from medintake.gate.completion import UploadCompletionGate
from medintake.gate.polling import BackoffPolicy, wait_for_completion

__all__ = ["BackoffPolicy", "UploadCompletionGate", "wait_for_completion"]
