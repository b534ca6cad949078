from fastapi import APIRouter, BackgroundTasks, Body, Depends, status
from fastapi.responses import Response
from typing import Any, List

from src.exceptions import ApiError, StorageError, TicketValidationError
from src.tickets.schemas import TicketCreated, TicketRecord, ErrorResponse
from src.tickets.service import TicketService
from src.tickets.validation import validate_ticket_submission
from src.tickets.notifications import EmailNotifier
from src.tickets.export import render_tickets_csv, EXPORT_FILENAME
from src.tickets.dependencies import get_ticket_service, get_notifier, require_admin_token

router = APIRouter()

@router.post(
    "",
    response_model=TicketCreated,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
def create_ticket(
    background_tasks: BackgroundTasks,
    payload: Any = Body(None),
    service: TicketService = Depends(get_ticket_service),
    notifier: EmailNotifier = Depends(get_notifier)
):
    """Submit a ticket reservation"""
    try:
        submission = validate_ticket_submission(payload)
    except TicketValidationError as e:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Validation failed", e.errors)

    try:
        record = service.create(submission)
    except StorageError:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error saving ticket")

    # Runs after the response is sent
    background_tasks.add_task(notifier.notify, record)

    return TicketCreated(id=record.id)

@router.get(
    "",
    response_model=List[TicketRecord],
    dependencies=[Depends(require_admin_token)],
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
def list_tickets(service: TicketService = Depends(get_ticket_service)):
    """Latest 50 reservations, newest first"""
    try:
        return service.list_recent()
    except StorageError:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error fetching tickets")

@router.get(
    "/export",
    dependencies=[Depends(require_admin_token)],
    response_class=Response,
    responses={
        200: {"content": {"text/csv": {}}},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse}
    }
)
def export_tickets(service: TicketService = Depends(get_ticket_service)):
    """Download every reservation as CSV"""
    try:
        records = service.list_all()
    except StorageError:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error exporting tickets")

    return Response(
        content=render_tickets_csv(records),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"}
    )
