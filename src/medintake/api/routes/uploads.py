"""Upload completion endpoint: readiness gate in front of extraction."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from medintake.api.dependencies import get_services
from medintake.exceptions import ValidationError
from medintake.models import CompletionResult
from medintake.services import Services

log = logging.getLogger(__name__)

router = APIRouter(tags=["uploads"])


class CompleteUploadsRequest(BaseModel):
    """Batch of uploaded documents; ``patientId`` may come from config."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    document_ids: list[int]
    patient_id: Optional[str] = None


@router.post("/uploads/complete", response_model=CompletionResult)
async def complete_uploads(
    body: CompleteUploadsRequest,
    services: Services = Depends(get_services),
) -> CompletionResult:
    patient_id = body.patient_id or services.settings.tenancy.default_patient_id
    if not patient_id:
        raise ValidationError(
            "Missing or invalid patientId or documentIds",
            field_errors={"patientId": "required"},
        )
    log.info("Completing uploads for patient %s: %s", patient_id, body.document_ids)
    return await services.gate.check_and_trigger(patient_id, body.document_ids)
