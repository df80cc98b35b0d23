"""
Error types and the explicit write outcome returned by every store write.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class LearnpathError(Exception):
    """Base error."""

    def __init__(self, message: str, code: str = "learnpath_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class RecordStoreError(LearnpathError):
    """A read against the record store failed."""

    def __init__(self, operation: str, message: str = "record store unavailable"):
        self.operation = operation
        super().__init__(f"{operation}: {message}", "record_store_error")


class WriteResult(BaseModel):
    """Outcome of a store write. Writes never raise; callers decide what to do with failures."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    error: Optional[str] = None

    @classmethod
    def success(cls) -> "WriteResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str) -> "WriteResult":
        return cls(ok=False, error=error)
