"""Caller-supplied context for encode and decode."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EmotionInput(BaseModel):
    valence: float = Field(..., ge=0.0, le=1.0)
    arousal: float = Field(..., ge=0.0, le=1.0)
    dominance: float | None = Field(default=None, ge=0.0, le=1.0)


class EncodeContext(BaseModel):
    emotion: EmotionInput | None = None
    narrative_tag: str | None = Field(default=None, description="Free-form tag stored with the memory entry")
    timestamp: float | None = Field(default=None, description="Unix seconds; defaults to now")
