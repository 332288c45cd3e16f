"""Common schema helpers."""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator

from snapshare.db.time import as_utc

UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]
