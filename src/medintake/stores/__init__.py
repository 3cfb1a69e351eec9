"""Record stores for forms and documents."""

from __future__ import annotations

from medintake.stores.document_store import DocumentStore
from medintake.stores.form_store import FormStore

__all__ = ["DocumentStore", "FormStore"]
