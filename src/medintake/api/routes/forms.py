"""Form retrieval and the review save endpoint."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from medintake.api.dependencies import get_services
from medintake.exceptions import ValidationError
from medintake.models import MedicalHistoryForm, Question
from medintake.review.session import ReviewSession, ReviewState
from medintake.services import Services

router = APIRouter(tags=["forms"])


class _CamelBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReviewResponse(_CamelBody):
    form_id: int
    version: int
    state: ReviewState
    complete: bool
    needs_review: list[Question]
    resolved: list[Question]


class SaveAnswersRequest(_CamelBody):
    answers: dict[str, Any]
    expected_version: Optional[int] = None


async def _open_session(services: Services, form_id: int) -> ReviewSession:
    form = await services.forms.get_form_by_id(form_id)
    session = ReviewSession(services.forms)
    session.open(form)
    return session


@router.get("/forms/latest", response_model=MedicalHistoryForm)
async def latest_form(
    patient_id: Optional[str] = Query(default=None, alias="patientId"),
    services: Services = Depends(get_services),
) -> MedicalHistoryForm:
    tenancy = services.settings.tenancy
    patient_id = patient_id or tenancy.default_patient_id
    scope = patient_id if tenancy.scope_latest_form_to_patient else None
    return await services.forms.get_latest_form(scope)


@router.get("/forms/{form_id}", response_model=MedicalHistoryForm)
async def get_form(form_id: int, services: Services = Depends(get_services)) -> MedicalHistoryForm:
    return await services.forms.get_form_by_id(form_id)


@router.get("/forms/{form_id}/review", response_model=ReviewResponse)
async def review_form(form_id: int, services: Services = Depends(get_services)) -> ReviewResponse:
    session = await _open_session(services, form_id)
    return ReviewResponse(
        form_id=session.form.id,
        version=session.form.version,
        state=session.state,
        complete=session.state is ReviewState.COMPLETE,
        needs_review=session.under_review,
        resolved=session.resolved,
    )


@router.put("/forms/{form_id}/questions", response_model=MedicalHistoryForm)
async def save_answers(
    form_id: int,
    body: SaveAnswersRequest,
    services: Services = Depends(get_services),
) -> MedicalHistoryForm:
    """Save reviewed answers; every question under review needs one."""
    session = await _open_session(services, form_id)
    if session.state is ReviewState.COMPLETE:
        raise ValidationError(f"Form {form_id} has no questions awaiting review")

    field_errors: dict[str, str] = {}
    for question_id, value in body.answers.items():
        try:
            session.set_answer(question_id, value)
        except ValidationError as exc:
            field_errors.update(exc.field_errors)
    if field_errors:
        raise ValidationError("Some answers cannot be saved", field_errors=field_errors)

    return await session.save(expected_version=body.expected_version)
