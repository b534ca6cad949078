import csv
import io
from datetime import datetime, timezone
from typing import Iterable

import pandas as pd

from src.tickets.schemas import TicketRecord

EXPORT_COLUMNS = ["createdAt", "firstName", "lastName", "email", "ticketType", "quantity", "notes"]
EXPORT_HEADER = ",".join(EXPORT_COLUMNS)
EXPORT_FILENAME = "tickets.csv"

def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2025-01-31T09:15:00.000Z"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")

def render_tickets_csv(records: Iterable[TicketRecord]) -> str:
    """Render records as a CSV document with every field quoted.

    The header line is fixed and unquoted. Missing values render as ``""``.
    Lines are joined by ``\\n`` with no trailing newline, so a store with no
    records exports exactly the header.
    """
    rows = []
    for record in records:
        rows.append({
            "createdAt": format_timestamp(record.created_at) if record.created_at else "",
            "firstName": record.first_name,
            "lastName": record.last_name,
            "email": record.email,
            "ticketType": record.ticket_type,
            "quantity": "" if record.quantity is None else str(record.quantity),
            "notes": record.notes,
        })

    if not rows:
        return EXPORT_HEADER

    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS).fillna("")

    output = io.StringIO()
    df.to_csv(
        output,
        index=False,
        header=False,
        quoting=csv.QUOTE_ALL,
        lineterminator="\n",
    )
    body = output.getvalue()
    if body.endswith("\n"):
        body = body[:-1]
    return EXPORT_HEADER + "\n" + body
