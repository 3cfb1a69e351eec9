"""Render documents as the plain-text descriptions sent to the extraction model."""

from __future__ import annotations

import json

from medintake.models import Document, DocumentDescription


def build_document_description(document: Document) -> DocumentDescription:
    """Compose ``Document Name`` / ``Document Type`` lines plus the OCR output.

    A structured payload with a ``description`` field contributes that text
    verbatim; any other structured payload is embedded as compact JSON.
    """
    lines = []
    if document.display_name:
        lines.append(f"Document Name: {document.display_name}")
    if document.doc_type:
        lines.append(f"Document Type: {document.doc_type}")

    body = ""
    output = document.llm_output
    if isinstance(output, dict):
        description = output.get("description")
        if description:
            body = description if isinstance(description, str) else json.dumps(description, ensure_ascii=False)
        else:
            body = json.dumps(output, ensure_ascii=False, separators=(",", ":"))
    elif isinstance(output, str):
        body = output

    text = "\n".join(lines)
    if body:
        text = f"{text}\n{body}" if text else body
    return DocumentDescription(document_id=document.id, text=text)


def build_document_descriptions(documents: list[Document]) -> list[DocumentDescription]:
    return [build_document_description(d) for d in documents]
