import smtplib
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from src.config import Settings
from src.exceptions import NotificationError
from src.tickets.notifications import EmailNotifier, LoggingTransport, SmtpTransport
from src.tickets.schemas import TicketRecord


@pytest.fixture
def record():
    return TicketRecord(
        id=7,
        first_name='Ada',
        last_name='Lovelace',
        email='ada@example.com',
        ticket_type='VIP Pass',
        quantity=2,
        notes='Front row',
        created_at=datetime(2025, 6, 1, tzinfo=timezone.utc),
    )


class RecordingTransport:
    def __init__(self):
        self.sent = []

    def send(self, message):
        self.sent.append(message)


class FailingTransport:
    def __init__(self, fail_for):
        self.fail_for = fail_for
        self.sent = []

    def send(self, message):
        if message['To'] == self.fail_for:
            raise NotificationError('relay refused') from smtplib.SMTPRecipientsRefused({})
        self.sent.append(message)


def test_guest_and_admin_messages_are_sent(record):
    transport = RecordingTransport()
    notifier = EmailNotifier(transport, sender='tickets@example.com', admin_email='admin@example.com')

    notifier.notify(record)

    guest, admin = transport.sent
    assert guest['To'] == 'ada@example.com'
    assert guest['From'] == 'tickets@example.com'
    assert '#7' in guest['Subject']
    assert 'VIP Pass' in guest.get_content()
    assert 'Front row' in guest.get_content()
    assert admin['To'] == 'admin@example.com'
    assert admin['Reply-To'] == 'ada@example.com'
    assert 'Ada Lovelace' in admin.get_content()


def test_admin_message_skipped_without_admin_address(record):
    transport = RecordingTransport()
    notifier = EmailNotifier(transport, sender='tickets@example.com')

    notifier.notify(record)

    assert [message['To'] for message in transport.sent] == ['ada@example.com']


def test_nothing_sent_without_sender(record):
    transport = RecordingTransport()
    notifier = EmailNotifier(transport, sender=None, admin_email='admin@example.com')

    notifier.notify(record)

    assert transport.sent == []


def test_transport_failure_is_swallowed_and_other_messages_still_go_out(record):
    transport = FailingTransport(fail_for='ada@example.com')
    notifier = EmailNotifier(transport, sender='tickets@example.com', admin_email='admin@example.com')

    notifier.notify(record)

    assert [message['To'] for message in transport.sent] == ['admin@example.com']


def test_smtp_transport_wraps_delivery_errors(record):
    message = EmailNotifier(RecordingTransport(), sender='tickets@example.com').compose_messages(record)[0]
    smtp = MagicMock()
    smtp.__enter__.return_value.send_message.side_effect = smtplib.SMTPServerDisconnected('gone')

    with patch('src.tickets.notifications.smtplib.SMTP', return_value=smtp):
        with pytest.raises(NotificationError):
            SmtpTransport('mail.example.com', starttls=False).send(message)


def test_smtp_transport_logs_in_and_sends(record):
    message = EmailNotifier(RecordingTransport(), sender='tickets@example.com').compose_messages(record)[0]
    smtp = MagicMock()
    session = smtp.__enter__.return_value

    with patch('src.tickets.notifications.smtplib.SMTP', return_value=smtp) as smtp_cls:
        SmtpTransport('mail.example.com', port=2525, username='user', password='secret').send(message)

    smtp_cls.assert_called_once_with('mail.example.com', 2525, timeout=10.0)
    session.starttls.assert_called_once()
    session.login.assert_called_once_with('user', 'secret')
    session.send_message.assert_called_once_with(message)


def test_from_settings_picks_transport():
    with_smtp = Settings(STORE_URL='sqlite://', MAIL_FROM='tickets@example.com', SMTP_HOST='mail.example.com')
    without_smtp = Settings(STORE_URL='sqlite://', MAIL_FROM='tickets@example.com', SMTP_HOST=None)

    assert isinstance(EmailNotifier.from_settings(with_smtp).transport, SmtpTransport)
    assert isinstance(EmailNotifier.from_settings(without_smtp).transport, LoggingTransport)


def test_logging_transport_only_logs(record):
    transport = LoggingTransport()
    message = EmailNotifier(transport, sender='tickets@example.com').compose_messages(record)[0]

    with patch('src.tickets.notifications.logger') as log:
        for _ in range(3):
            transport.send(message)

    assert log.info.call_count == 3
    assert vars(transport) == {}


def test_unbuildable_admin_message_is_logged_and_guest_still_notified(record):
    transport = RecordingTransport()
    notifier = EmailNotifier(
        transport, sender='tickets@example.com', admin_email='admin@example.com\nBcc: someone@example.com'
    )

    with patch('src.tickets.notifications.logger') as log:
        notifier.notify(record)

    assert [message['To'] for message in transport.sent] == ['ada@example.com']
    log.exception.assert_called_once()
