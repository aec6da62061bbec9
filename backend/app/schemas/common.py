"""
Shared field types for request and record schemas.
"""

from datetime import datetime, timezone
from typing import Annotated
from pydantic import AfterValidator


def _as_utc(value: datetime) -> datetime:
    # Naive input is taken to be UTC so that sorting never mixes naive and aware values
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UTCDatetime = Annotated[datetime, AfterValidator(_as_utc)]
