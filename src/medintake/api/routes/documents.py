"""Document registration, upstream processing output, and direct analysis."""

from __future__ import annotations

from typing import Any, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from medintake.api.dependencies import get_services
from medintake.models import Document, ExtractionOutcome
from medintake.services import Services

router = APIRouter(tags=["documents"])


class _CamelBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterDocumentRequest(_CamelBody):
    display_name: str = Field(min_length=1)
    raw_location: str = Field(min_length=1)
    patient_id: Optional[str] = None


class ProcessingOutputRequest(_CamelBody):
    """Written by the OCR/vision step once a document is described."""

    doc_type: str = Field(alias="type", min_length=1)
    llm_output: Union[dict[str, Any], str]


class AnalyzeRequest(_CamelBody):
    patient_id: str = Field(min_length=1)
    document_ids: Optional[list[int]] = None
    form_id: Optional[int] = None


@router.post("/documents", response_model=Document, status_code=201)
async def register_document(
    body: RegisterDocumentRequest,
    services: Services = Depends(get_services),
) -> Document:
    patient_id = body.patient_id or services.settings.tenancy.default_patient_id
    return await services.documents.register_document(
        body.display_name, body.raw_location, patient_id=patient_id
    )


@router.put("/documents/{document_id}/processing", response_model=Document)
async def record_processing_output(
    document_id: int,
    body: ProcessingOutputRequest,
    services: Services = Depends(get_services),
) -> Document:
    return await services.documents.record_processing_output(document_id, body.doc_type, body.llm_output)


@router.post("/documents/analyze", response_model=ExtractionOutcome)
async def analyze_documents(
    body: AnalyzeRequest,
    services: Services = Depends(get_services),
) -> ExtractionOutcome:
    """Run extraction directly; provider and parse failures map to 500."""
    return await services.orchestrator.run(body.patient_id, body.document_ids, form_id=body.form_id)
