from __future__ import annotations

from pydantic import BaseModel


class StatusChange(BaseModel):
    # Validated against the transition table, not the enum, so that an
    # unknown value answers with the list of valid ones.
    status: str
