from sqlalchemy import Column, Integer, BigInteger, String, DateTime, Text, Index
from src.database import Base

# ================================
# Ticket Reservations
# ================================
class TicketReservation(Base):
    __tablename__ = "ticket_reservations"
    __table_args__ = (
        Index("ix_ticket_reservations_email_created_at", "email", "created_at"),
        {"sqlite_autoincrement": True},
    )

    # SQLite only auto-increments INTEGER primary keys
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True)
    first_name = Column(String(80), nullable=False)
    last_name = Column(String(80), nullable=False)
    email = Column(String(160), nullable=False)
    ticket_type = Column(String(40), nullable=False)
    quantity = Column(Integer, nullable=False)
    notes = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
