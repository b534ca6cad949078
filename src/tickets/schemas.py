from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime, timezone
from enum import Enum

class TicketType(str, Enum):
    """Ticket categories on sale"""
    GA_PASS = "GA Pass"
    GA_PASS_PARKING = "GA Pass + Parking"
    VIP_PASS = "VIP Pass"
    FIRST_DAY = "1st Day Ticket"
    SECOND_DAY = "2nd Day Ticket"
    WEEKEND_PARKING = "Weekend Parking Pass"
    SINGLE_DAY_PARKING = "Single Day Parking"

ALLOWED_TICKET_TYPES = [ticket_type.value for ticket_type in TicketType]

# Field limits
NAME_MAX_LENGTH = 80
EMAIL_MAX_LENGTH = 160
NOTES_MAX_LENGTH = 1000
QUANTITY_MIN = 1
QUANTITY_MAX = 20

class TicketSubmission(BaseModel):
    """Normalized reservation, ready to persist"""
    first_name: str
    last_name: str
    email: str
    ticket_type: TicketType
    quantity: int
    notes: str = ""

class TicketRecord(BaseModel):
    """Stored reservation as returned to administrators"""
    id: int
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    ticket_type: str = Field(alias="ticketType")
    quantity: int
    notes: Optional[str] = None
    created_at: datetime = Field(alias="createdAt")

    @validator("created_at")
    def assume_utc(cls, v):
        # SQLite hands back naive datetimes
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    class Config:
        from_attributes = True
        populate_by_name = True

class TicketCreated(BaseModel):
    message: str = "Saved"
    id: int

class HealthStatus(BaseModel):
    ok: bool = True
    store: bool

class ErrorResponse(BaseModel):
    message: str
    errors: Optional[List[str]] = None
