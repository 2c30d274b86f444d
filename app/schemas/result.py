"""
Action result envelope.

Every endpoint answers with ``{success, data, error, warnings}`` so
callers branch on ``success`` instead of catching transport errors.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ActionError(BaseModel):
    code: str
    message: str
    details: Optional[dict] = None


class ActionResult(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    error: Optional[ActionError] = None
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def ok(cls, data: Optional[T] = None, warnings: Optional[list[str]] = None) -> "ActionResult[T]":
        return cls(success=True, data=data, warnings=warnings or [])

    @classmethod
    def fail(cls, code: str, message: str, details: Optional[dict] = None) -> "ActionResult[T]":
        return cls(success=False, error=ActionError(code=code, message=message, details=details))
