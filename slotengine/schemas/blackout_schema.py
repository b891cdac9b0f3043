"""Blackout (holiday / leave) data models."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator


class BlackoutScope(str, Enum):
    BUSINESS = "business"
    EMPLOYEE = "employee"


class BlackoutPeriod(BaseModel):
    """An inclusive whole-day exclusion window for a business or an employee."""

    model_config = ConfigDict(frozen=True)

    id: str
    scope: BlackoutScope = BlackoutScope.BUSINESS
    scope_id: Optional[str] = None
    start_date: date
    end_date: date
    reason: Optional[str] = None

    @model_validator(mode="after")
    def _ordered_dates(self) -> "BlackoutPeriod":
        if self.start_date > self.end_date:
            raise ValueError(
                f"Blackout {self.id} ends ({self.end_date}) before it starts ({self.start_date})"
            )
        if self.scope == BlackoutScope.EMPLOYEE and not self.scope_id:
            raise ValueError(f"Employee blackout {self.id} needs a scope_id")
        return self
