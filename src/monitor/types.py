"""Domain types for the toast notification path."""

from __future__ import annotations

import time
from enum import StrEnum

from pydantic import BaseModel, Field


class ToastVariant(StrEnum):
    """Visual variant of a toast."""

    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class Toast(BaseModel):
    """A one-shot notification raised for a critical alert batch."""

    title: str
    description: str = ""
    variant: ToastVariant = ToastVariant.DESTRUCTIVE
    alert_id: str = ""
    batch_sequence: int = 0
    timestamp: float = Field(default_factory=time.time)
