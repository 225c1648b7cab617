"""Pydantic schemas for request/response payloads."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, StrictInt

from otp_store.models import IssueOutcome


class IssueRequest(BaseModel):
    code: StrictInt
    # Left untyped: the store coerces anything non-numeric to 0.
    duration_ms: Any = None


class RedeemRequest(BaseModel):
    code: StrictInt


class IssueResult(BaseModel):
    code: int
    existed: bool
    outcome: IssueOutcome


class RedeemResult(BaseModel):
    code: int
    accepted: bool


class ServiceResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Optional[dict] = None
