"""
Pydantic schemas for help requests.

A help request is a ticket raised by a team from its table or breakout
room.  Python attributes are snake_case; the JSON representation uses
camelCase (``requesterEmail``, ``tableOrBreakoutRoom`` ...) through an
alias generator, and both spellings are accepted on input.

``requestTime`` is a local date‑time without timezone.  A trailing
offset or ``Z`` is accepted and dropped; the clock time is kept as
written.
"""

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

REQUEST_TIME_PATTERN = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:\.(?P<fraction>\d{1,9}))?)?"
    r"(?:Z|[+-]\d{2}:\d{2})?",
    re.ASCII,
)


def parse_request_time(value: Any) -> datetime:
    """Parse an ISO‑8601 date‑time into a naive ``datetime``.

    The value must have a ``T`` separator and at least hours and
    minutes.  Fractions beyond microseconds are truncated.  Raises
    ``ValueError`` when the value cannot be parsed.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if not isinstance(value, str):
        raise ValueError("requestTime must be an ISO-8601 date-time string")
    match = REQUEST_TIME_PATTERN.fullmatch(value.strip())
    error = f"requestTime must be an ISO-8601 date-time (YYYY-MM-DDTHH:MM:SS), got {value!r}"
    if match is None:
        raise ValueError(error)
    fraction = (match.group("fraction") or "").ljust(6, "0")[:6]
    try:
        return datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("hour")),
            int(match.group("minute")),
            int(match.group("second") or 0),
            int(fraction),
        )
    except ValueError:
        raise ValueError(error) from None


class HelpRequestBase(BaseModel):
    """Fields shared by every help request payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    requester_email: str = Field(..., examples=["cgaucho@ucsb.edu"])
    team_id: str = Field(..., examples=["s22-5pm-3"])
    table_or_breakout_room: str = Field(..., examples=["7"])
    request_time: datetime = Field(..., examples=["2022-04-20T17:35:00"])
    explanation: str = Field(..., examples=["Need help with Swagger-ui"])
    solved: bool = Field(..., examples=[False])

    @field_validator("request_time", mode="before")
    @classmethod
    def _parse_request_time(cls, value: Any) -> datetime:
        return parse_request_time(value)


class HelpRequestCreate(HelpRequestBase):
    """Parameters of ``POST /api/helprequests/post``."""


class HelpRequestUpdate(HelpRequestBase):
    """Full replacement body for ``PUT /api/helprequests``.

    An ``id`` key in the body is accepted and ignored; the ``id`` query
    parameter identifies the record.
    """


class HelpRequestRead(HelpRequestBase):
    """A persisted help request."""

    id: int


class MessageResponse(BaseModel):
    message: str
