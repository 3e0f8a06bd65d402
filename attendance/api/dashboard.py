"""Dashboard routes for browser-based attendance tracking.

Pages are rendered server-side and updated through HTMX swaps. Write
endpoints answer with the refreshed data panels; every other open tab
refreshes through the event stream.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, Response, status

from attendance.context import (
    ADD_FAILED,
    DELETE_FAILED,
    LOAD_FAILED,
    SUBJECT_TOO_LONG,
    UPDATE_FAILED,
    DashboardContext,
)
from attendance.core.advisor import build_advice, validate_target
from attendance.core.summary import (
    DEFAULT_TARGET,
    SubjectRecord,
    build_projection_table,
    summarize,
)
from attendance.exceptions import InvalidTargetError
from attendance.models.subject import NAME_MAX_LENGTH, TYPE_MAX_LENGTH
from attendance.utils.api_helpers import snapshot_event_stream
from attendance.utils.dependencies import dependencies
from attendance.utils.templates import templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])


async def load_snapshot(ctx: DashboardContext) -> list[SubjectRecord]:
    """Current subjects, or an empty list if they cannot be loaded."""
    if not ctx.ready:
        return []
    records = await ctx.attempt(ctx.store.snapshot(ctx.user_id), LOAD_FAILED)
    return records if records is not None else []


async def panels_context(request: Request, ctx: DashboardContext) -> dict:
    """Build template context for the subject table and projections panel.

    Args:
        request: FastAPI request object.
        ctx: Dashboard context of the request.

    Returns:
        Context with subjects, summary, projections and the visible error.
    """
    records = await load_snapshot(ctx)
    return {
        "request": request,
        "subjects": records,
        "summary": summarize(records),
        "projections": build_projection_table(records),
        "error": await ctx.current_error(),
        "ready": ctx.ready,
    }


async def render_panels(request: Request, ctx: DashboardContext) -> Response:
    return templates.TemplateResponse(
        request=request,
        name="dashboard/components/panels.html",
        context=await panels_context(request, ctx),
    )


@router.get("/")
async def dashboard(
    request: Request,
    ctx: DashboardContext = Depends(dependencies.context),
) -> Response:
    """Display the attendance dashboard.

    Args:
        request: FastAPI request object.
        ctx: Dashboard context.

    Returns:
        Rendered dashboard page.
    """
    context = await panels_context(request, ctx)
    context.update(target=DEFAULT_TARGET, future_commitments="", advice=None)
    return templates.TemplateResponse(
        request=request,
        name="dashboard/index.html",
        context=context,
    )


@router.get("/dashboard/panels")
async def dashboard_panels(
    request: Request,
    ctx: DashboardContext = Depends(dependencies.context),
) -> Response:
    """Return refreshed data panels for HTMX swap."""
    return await render_panels(request, ctx)


@router.post("/dashboard/subjects")
async def add_subject(
    request: Request,
    name: str = Form(default=""),
    type: str = Form(default="Lecture"),
    ctx: DashboardContext = Depends(dependencies.context),
) -> Response:
    """Add a subject from the modal form.

    Blank name or type leaves the collection untouched; one longer than
    the stored column is rejected with an error message.

    Args:
        request: FastAPI request object.
        name: Subject name as typed.
        type: Subject type as typed.
        ctx: Dashboard context.

    Returns:
        Refreshed data panels.
    """
    name, type = name.strip(), type.strip()
    if not (ctx.ready and name and type):
        return await render_panels(request, ctx)

    if len(name) > NAME_MAX_LENGTH or len(type) > TYPE_MAX_LENGTH:
        logger.warning("Rejected oversized subject", extra={"user_id": ctx.user_id})
        await ctx.report(SUBJECT_TOO_LONG)
    else:
        await ctx.attempt(ctx.store.create(ctx.user_id, name, type), ADD_FAILED)
    return await render_panels(request, ctx)


@router.post("/dashboard/subjects/{subject_id}/{field}")
async def update_subject_count(
    request: Request,
    subject_id: str,
    field: str,
    value: str = Form(default=""),
    ctx: DashboardContext = Depends(dependencies.context),
) -> Response:
    """Persist an edited count; input that is not a count is ignored.

    Args:
        request: FastAPI request object.
        subject_id: Subject being edited.
        field: "conducted" or "present".
        value: Raw input value.
        ctx: Dashboard context.

    Returns:
        Refreshed data panels.
    """
    if ctx.ready:
        await ctx.attempt(
            ctx.store.update_field(ctx.user_id, subject_id, field, value),
            UPDATE_FAILED,
        )
    return await render_panels(request, ctx)


@router.delete("/dashboard/subjects/{subject_id}")
async def delete_subject(
    request: Request,
    subject_id: str,
    ctx: DashboardContext = Depends(dependencies.context),
) -> Response:
    """Delete a subject; the page asks for confirmation before calling this."""
    if ctx.ready:
        await ctx.attempt(ctx.store.delete(ctx.user_id, subject_id), DELETE_FAILED)
    return await render_panels(request, ctx)


@router.post("/dashboard/advice")
async def advise(
    request: Request,
    target: int = Form(default=DEFAULT_TARGET),
    future_commitments: str = Form(default=""),
    ctx: DashboardContext = Depends(dependencies.context),
) -> Response:
    """Build advice for the selected target and commitments.

    Args:
        request: FastAPI request object.
        target: Selected target percentage.
        future_commitments: Optional free-text note.
        ctx: Dashboard context.

    Returns:
        Rendered advisor panel, with the error banner swapped out of band.
    """
    advice: Optional[str] = None
    try:
        validate_target(target)
    except InvalidTargetError as e:
        logger.warning(f"Invalid advice target: {target}")
        await ctx.report(str(e))
        target = DEFAULT_TARGET
    else:
        summary = summarize(await load_snapshot(ctx))
        advice = build_advice(summary, target, future_commitments)

    return templates.TemplateResponse(
        request=request,
        name="dashboard/components/advisor.html",
        context={
            "request": request,
            "target": target,
            "future_commitments": future_commitments,
            "advice": advice,
            "error": await ctx.current_error(),
            "oob_banner": True,
        },
    )


@router.post("/dashboard/errors/dismiss")
async def dismiss_error(
    request: Request,
    ctx: DashboardContext = Depends(dependencies.context),
) -> Response:
    """Hide the error banner."""
    await ctx.dismiss_error()
    return templates.TemplateResponse(
        request=request,
        name="dashboard/components/error_banner.html",
        context={"request": request, "error": await ctx.current_error()},
    )


@router.get("/dashboard/events", response_model=None)
async def dashboard_events(
    request: Request,
    ctx: DashboardContext = Depends(dependencies.context),
) -> Response:
    """Notify the page whenever the subject collection changes.

    Each event carries the subject count; the page then reloads its panels.
    Returns 204 when no stream can be opened, which stops the browser from
    reconnecting.
    """
    stream = None
    if ctx.ready:
        stream = await ctx.attempt(ctx.store.subscribe(ctx.user_id), LOAD_FAILED)
    if stream is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    async def report_failure(exc: Exception) -> None:
        await ctx.report(LOAD_FAILED)

    return snapshot_event_stream(
        request,
        stream,
        lambda snapshot: {"count": len(snapshot)},
        on_error=report_failure,
    )
