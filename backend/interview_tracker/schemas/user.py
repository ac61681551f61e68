from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserMeOut(BaseModel):
    id: int
    email: str
    name: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
