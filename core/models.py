"""Data models shared across the expansion pipeline."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field


class ActionRecord(BaseModel):
    """A single IAM action known for a service, e.g. ``iam:CreateRole``."""

    service: str = Field(..., min_length=1, description="Lowercase service prefix, e.g. iam")
    name: str = Field(..., min_length=1, description="Case-sensitive action name, e.g. CreateRole")
    access_level: Optional[str] = Field(default=None, description="Access level such as Read or Write")
    service_name: Optional[str] = Field(default=None, description="Descriptive service name from the feed")

    model_config = {
        "frozen": True,
    }

    @computed_field
    @property
    def qualified(self) -> str:
        return f"{self.service}:{self.name}"

    @property
    def key(self) -> tuple[str, str]:
        return (self.service, self.name)


class StatementError(BaseModel):
    """A statement that could not be expanded and was copied through unchanged."""

    index: int
    path: str
    error: str
    message: str


class ExpansionResult(BaseModel):
    """Outcome of a best-effort policy document expansion."""

    document: dict[str, Any]
    errors: list[StatementError] = Field(default_factory=list)

    @computed_field
    @property
    def ok(self) -> bool:
        return not self.errors


__all__ = ["ActionRecord", "StatementError", "ExpansionResult"]
