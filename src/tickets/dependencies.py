import secrets
from typing import Optional
from fastapi import Depends, Header, status
from sqlalchemy.orm import Session
from src.database import get_db
from src.config import settings
from src.exceptions import ApiError
from src.tickets.service import TicketService
from src.tickets.notifications import EmailNotifier

_notifier: Optional[EmailNotifier] = None

def get_ticket_service(db: Session = Depends(get_db)) -> TicketService:
    """Ticket gateway bound to the request's session"""
    return TicketService(db)

def get_notifier() -> EmailNotifier:
    """Process-wide notifier, built from settings on first use"""
    global _notifier
    if _notifier is None:
        _notifier = EmailNotifier.from_settings(settings)
    return _notifier

def require_admin_token(x_admin_token: Optional[str] = Header(None)):
    """Gate admin reads behind ADMIN_TOKEN when one is configured"""
    if not settings.ADMIN_TOKEN:
        return
    if not x_admin_token or not secrets.compare_digest(x_admin_token, settings.ADMIN_TOKEN):
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
