from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class RefreshResponseSchema(BaseModel):
    fetched_at: datetime
    updated_trips: int
