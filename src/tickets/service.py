from typing import List
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from src.models import TicketReservation
from src.exceptions import StorageError
from src.logging_config import get_logger
from src.tickets.schemas import TicketSubmission, TicketRecord

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 50

class TicketService:
    """Create and read ticket reservations. Records are never updated or deleted."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, submission: TicketSubmission) -> TicketRecord:
        """Insert a validated submission; the store assigns the id"""
        reservation = TicketReservation(
            first_name=submission.first_name,
            last_name=submission.last_name,
            email=submission.email,
            ticket_type=submission.ticket_type.value,
            quantity=submission.quantity,
            notes=submission.notes,
            created_at=datetime.now(timezone.utc),
        )

        try:
            self.db.add(reservation)
            self.db.commit()
            self.db.refresh(reservation)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to save ticket reservation")
            raise StorageError("could not save ticket reservation") from e

        logger.info(
            "Ticket reservation saved",
            extra={"ticket_id": reservation.id, "ticket_type": reservation.ticket_type},
        )
        return TicketRecord.model_validate(reservation)

    def list_recent(self, limit: int = DEFAULT_LIST_LIMIT) -> List[TicketRecord]:
        """Most recent reservations, newest first"""
        return self._fetch(limit)

    def list_all(self) -> List[TicketRecord]:
        """Every reservation, newest first"""
        return self._fetch(None)

    def _fetch(self, limit) -> List[TicketRecord]:
        query = self.db.query(TicketReservation).order_by(
            TicketReservation.created_at.desc(),
            TicketReservation.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)

        try:
            reservations = query.all()
        except SQLAlchemyError as e:
            logger.exception("Failed to read ticket reservations")
            raise StorageError("could not read ticket reservations") from e

        return [TicketRecord.model_validate(reservation) for reservation in reservations]
