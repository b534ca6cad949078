"""Reservation confirmation emails.

Notifications are best-effort: ``EmailNotifier.notify`` is scheduled as a
background task after the reservation is saved, and any transport failure is
logged and dropped. Nothing is retried.
"""

import smtplib
from email.message import EmailMessage
from typing import Callable, List, Optional, Protocol

from src.config import Settings
from src.exceptions import NotificationError
from src.logging_config import get_logger
from src.tickets.schemas import TicketRecord

logger = get_logger(__name__)


class MailTransport(Protocol):
    def send(self, message: EmailMessage) -> None:
        ...


class SmtpTransport:
    """Deliver messages through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        starttls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.starttls = starttls
        self.timeout = timeout

    def send(self, message: EmailMessage) -> None:
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.starttls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"SMTP delivery to {message['To']} failed") from e


class LoggingTransport:
    """Log outgoing messages instead of sending them (no SMTP host configured)."""

    def send(self, message: EmailMessage) -> None:
        logger.info(
            "Email not sent, no SMTP host configured",
            extra={"to": message["To"], "subject": message["Subject"]},
        )


class EmailNotifier:
    """Compose and dispatch the guest confirmation and the admin notice."""

    def __init__(self, transport: MailTransport, sender: Optional[str], admin_email: Optional[str] = None):
        self.transport = transport
        self.sender = sender
        self.admin_email = admin_email

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailNotifier":
        if settings.SMTP_HOST:
            transport = SmtpTransport(
                host=settings.SMTP_HOST,
                port=settings.SMTP_PORT,
                username=settings.SMTP_USERNAME,
                password=settings.SMTP_PASSWORD,
                starttls=settings.SMTP_STARTTLS,
                timeout=settings.SMTP_TIMEOUT,
            )
        else:
            transport = LoggingTransport()
        return cls(transport, sender=settings.MAIL_FROM, admin_email=settings.ADMIN_EMAIL)

    def _composers(self) -> List[Callable[[TicketRecord], EmailMessage]]:
        composers = [self._guest_confirmation]
        if self.admin_email:
            composers.append(self._admin_notice)
        return composers

    def compose_messages(self, record: TicketRecord) -> List[EmailMessage]:
        return [compose(record) for compose in self._composers()]

    def notify(self, record: TicketRecord) -> None:
        """Send every message for a saved reservation; failures are only logged."""
        if not self.sender:
            logger.debug("MAIL_FROM not configured, skipping notifications", extra={"ticket_id": record.id})
            return

        for compose in self._composers():
            try:
                message = compose(record)
                self.transport.send(message)
            except NotificationError as e:
                logger.error(
                    "Notification failed",
                    extra={"ticket_id": record.id, "error": str(e.__cause__ or e)},
                )
            except Exception:
                logger.exception("Unexpected notification failure", extra={"ticket_id": record.id})
            else:
                logger.info("Notification sent", extra={"ticket_id": record.id, "to": message["To"]})

    def _guest_confirmation(self, record: TicketRecord) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = record.email
        message["Subject"] = f"Your ticket reservation #{record.id}"
        message.set_content(
            f"Hi {record.first_name},\n"
            f"\n"
            f"Thanks for your reservation. Here is what we received:\n"
            f"\n"
            f"{self._summary(record)}\n"
            f"\n"
            f"We'll be in touch with payment and pickup details.\n"
        )
        return message

    def _admin_notice(self, record: TicketRecord) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = self.admin_email
        message["Reply-To"] = record.email
        message["Subject"] = f"New reservation: {record.quantity} x {record.ticket_type}"
        message.set_content(
            f"A new ticket reservation was submitted.\n"
            f"\n"
            f"Name: {record.first_name} {record.last_name}\n"
            f"Email: {record.email}\n"
            f"{self._summary(record)}\n"
        )
        return message

    @staticmethod
    def _summary(record: TicketRecord) -> str:
        lines = [
            f"Reservation: #{record.id}",
            f"Ticket type: {record.ticket_type}",
            f"Quantity: {record.quantity}",
        ]
        if record.notes:
            lines.append(f"Notes: {record.notes}")
        return "\n".join(lines)
