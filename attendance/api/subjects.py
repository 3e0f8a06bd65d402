"""Subjects API endpoints."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi import status as http_status
from fastapi.responses import StreamingResponse

from attendance.core.advisor import build_advice, validate_target
from attendance.core.summary import build_projection_table, summarize
from attendance.schemas.subject import (
    AdviceRequest,
    AdviceResponse,
    ProjectionResponse,
    SubjectCountUpdate,
    SubjectCreate,
    SubjectResponse,
    SummaryResponse,
)
from attendance.services.subject_feed import SubjectFeed
from attendance.services.subject_store import SubjectStore
from attendance.utils.api_helpers import snapshot_event_stream
from attendance.utils.dependencies import dependencies

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Subjects"])


@router.get("/subjects")
async def list_subjects(
    user_id: str = Depends(dependencies.user_id),
    store: SubjectStore = Depends(dependencies.store),
) -> list[SubjectResponse]:
    """List the caller's subjects ordered by name."""
    records = await store.snapshot(user_id)
    return [SubjectResponse.from_record(r) for r in records]


@router.post("/subjects", status_code=http_status.HTTP_201_CREATED)
async def create_subject(
    data: SubjectCreate,
    user_id: str = Depends(dependencies.user_id),
    store: SubjectStore = Depends(dependencies.store),
) -> dict[str, str]:
    """Add a subject with zero counts.

    Returns:
        Identifier of the new subject. The full collection is pushed on the
        subject stream.
    """
    subject_id = await store.create(user_id, data.name, data.type)
    return {"id": subject_id}


@router.patch("/subjects/{subject_id}")
async def update_subject_count(
    subject_id: str,
    data: SubjectCountUpdate,
    user_id: str = Depends(dependencies.user_id),
    store: SubjectStore = Depends(dependencies.store),
) -> SubjectResponse:
    """Overwrite the conducted or present count of a subject.

    Raises:
        RecordNotFoundError: If the subject does not belong to the caller.
    """
    record = await store.update_field(user_id, subject_id, data.field, data.value)
    return SubjectResponse.from_record(record)


@router.delete("/subjects/{subject_id}", status_code=http_status.HTTP_204_NO_CONTENT)
async def delete_subject(
    subject_id: str,
    user_id: str = Depends(dependencies.user_id),
    store: SubjectStore = Depends(dependencies.store),
) -> None:
    """Delete a subject."""
    await store.delete(user_id, subject_id)


@router.get("/subjects/stream")
async def stream_subjects(
    request: Request,
    user_id: str = Depends(dependencies.user_id),
    store: SubjectStore = Depends(dependencies.store),
) -> StreamingResponse:
    """Stream full subject snapshots as Server-Sent Events.

    The first event carries the current collection; one event follows
    every add, edit or delete.
    """
    stream = await store.subscribe(user_id)
    return snapshot_event_stream(request, stream, SubjectFeed.encode)


@router.get("/summary")
async def get_summary(
    user_id: str = Depends(dependencies.user_id),
    store: SubjectStore = Depends(dependencies.store),
) -> SummaryResponse:
    """Totals and overall percentage across the caller's subjects."""
    summary = summarize(await store.snapshot(user_id))
    return SummaryResponse(**summary.to_dict())


@router.get("/projections")
async def get_projections(
    user_id: str = Depends(dependencies.user_id),
    store: SubjectStore = Depends(dependencies.store),
) -> list[ProjectionResponse]:
    """Classes needed to reach each supported target, per subject and overall."""
    rows = build_projection_table(await store.snapshot(user_id))
    return [
        ProjectionResponse(label=r.label, subject_id=r.subject_id, needed=r.needed)
        for r in rows
    ]


@router.post("/advice")
async def get_advice(
    data: AdviceRequest,
    user_id: str = Depends(dependencies.user_id),
    store: SubjectStore = Depends(dependencies.store),
) -> AdviceResponse:
    """Build advice for the chosen target.

    Raises:
        InvalidTargetError: If the target is not one of the supported choices.
    """
    target = validate_target(data.target)
    summary = summarize(await store.snapshot(user_id))
    return AdviceResponse(
        target=target,
        advice=build_advice(summary, target, data.future_commitments),
        summary=SummaryResponse(**summary.to_dict()),
    )
