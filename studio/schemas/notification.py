import datetime as dt
from typing import Optional

from pydantic import BaseModel


class DailyDigestRequest(BaseModel):
    date: Optional[dt.date] = None
    manual: bool = True


class DailyDigestResponse(BaseModel):
    success: bool = True
    message: str
    reservationsCount: int
    date: dt.date
    manual: bool


class DailyDigestFailure(BaseModel):
    success: bool = False
    error: str
