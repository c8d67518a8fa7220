"""Store submission and confirmation schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SubmissionStatus = Literal["pending", "approved", "rejected"]


class SubmissionCreate(BaseModel):
    """Proposed store payload."""

    name: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=512)
    category: str | None = Field(default=None, max_length=128)
    note: str | None = None
    lat: float | None = Field(default=None, ge=-90.0, le=90.0)
    lng: float | None = Field(default=None, ge=-180.0, le=180.0)

    @field_validator("name", "address")
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Value cannot be blank.")
        return cleaned

    @field_validator("category", "note")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None


class SubmissionRead(BaseModel):
    """Serialized submission."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    name: str
    address: str
    category: str | None
    note: str | None
    lat: float | None
    lng: float | None
    status: str
    created_at: datetime


class PendingSubmissionItem(SubmissionRead):
    """Pending submission with confirmation progress."""

    confirm_count: int
    threshold: int
    confirmed_by_me: bool
    is_mine: bool


class ConfirmationResult(BaseModel):
    """Outcome of a confirm/unconfirm call."""

    submission_id: int
    confirmed: bool
    approved: bool
    confirm_count: int
    threshold: int
    store_id: int | None = None


class ReconcileResult(BaseModel):
    reconciled_submission_ids: list[int]
