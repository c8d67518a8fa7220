"""Store status report schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

ReportStatus = Literal["open", "closed", "no_voucher"]
ClosureTier = Literal["none", "reported", "suspected_closed"]


class ReportCreate(BaseModel):
    status: ReportStatus


class ReportRead(BaseModel):
    """Serialized report without the reporter identity."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    store_id: int
    status: str
    created_at: datetime


class ReportSummary(BaseModel):
    """Display-only tally of the most recent reports for a store."""

    store_id: int
    recent: list[ReportRead]
    closed_count: int
    tier: ClosureTier
    reported_by_me: bool = False
