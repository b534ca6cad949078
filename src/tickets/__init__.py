"""
Ticket Reservation Module

Accepts event ticket reservations and serves them back to administrators.
It includes:

- Submission validation with itemized, field-ordered errors
- Persistence of reservations (create and read only)
- Best-effort confirmation emails to the guest and the administrator
- CSV export of every reservation

Key Components:
- validation.py: Pure validation and normalization of raw submissions
- service.py: TicketService, the gateway to the reservation table
- notifications.py: Email composition and mail transports
- export.py: CSV rendering
- router.py: FastAPI endpoints for submission, listing and export
- schemas.py: Pydantic models and field limits
"""

from .router import router
from .service import TicketService
from .validation import validate_ticket_submission
from .notifications import EmailNotifier, SmtpTransport, LoggingTransport
from .export import render_tickets_csv
from .schemas import TicketSubmission, TicketRecord, TicketCreated, TicketType

__all__ = [
    "router",
    "TicketService",
    "validate_ticket_submission",
    "EmailNotifier",
    "SmtpTransport",
    "LoggingTransport",
    "render_tickets_csv",
    "TicketSubmission",
    "TicketRecord",
    "TicketCreated",
    "TicketType"
]
