from typing import Any, Dict, Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, timezone

from rota_engine.core.exceptions import BusinessRuleError, ConflictReason

T = TypeVar("T")


class ErrorInfo(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class EngineResult(BaseModel, Generic[T]):
    """
    Outcome of an engine operation: either data or a typed business rejection.
    Infrastructure failures are raised, never folded into a result.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    data: Optional[T] = None
    error: Optional[ErrorInfo] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def reason(self) -> Optional[ConflictReason]:
        if self.error is None:
            return None
        return ConflictReason(self.error.code)

    @classmethod
    def ok(cls, data: T) -> "EngineResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message: str, code: str, details: Optional[Dict[str, Any]] = None) -> "EngineResult[T]":
        return cls(
            success=False,
            error=ErrorInfo(code=code, message=message, details=details)
        )

    @classmethod
    def from_error(cls, exc: BusinessRuleError) -> "EngineResult[T]":
        return cls.fail(exc.message, exc.error_code, exc.details)
