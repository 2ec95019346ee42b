from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, model_validator

class HealthStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"

class PingOutcome(BaseModel):
    """
    Result of a single ping. Connectors return this instead of raising,
    so the sampler never has to catch collaborator errors.
    """
    status: HealthStatus
    latency_ms: Optional[float] = None
    error_message: Optional[str] = None

    @model_validator(mode="after")
    def _check_latency(self) -> "PingOutcome":
        if (self.status == HealthStatus.SUCCESS) != (self.latency_ms is not None):
            raise ValueError("latency_ms is set for successful pings only")
        return self

    @classmethod
    def ok(cls, latency_ms: float) -> "PingOutcome":
        return cls(status=HealthStatus.SUCCESS, latency_ms=latency_ms)

    @classmethod
    def failed(cls, error_message: str) -> "PingOutcome":
        return cls(status=HealthStatus.FAILED, error_message=error_message)

    @property
    def succeeded(self) -> bool:
        return self.status == HealthStatus.SUCCESS

class SampleResult(BaseModel):
    """Outcome of one ping against one target in one tick"""
    target_index: int
    success: bool
    elapsed_ms: Optional[float] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_fields(self) -> "SampleResult":
        if self.success and (self.elapsed_ms is None or self.error is not None):
            raise ValueError("a successful sample carries elapsed_ms and no error")
        if not self.success and (self.elapsed_ms is not None or self.error is None):
            raise ValueError("a failed sample carries an error and no elapsed_ms")
        return self

    @classmethod
    def from_outcome(cls, target_index: int, outcome: PingOutcome) -> "SampleResult":
        if outcome.succeeded:
            return cls(target_index=target_index, success=True, elapsed_ms=outcome.latency_ms)
        return cls(target_index=target_index, success=False, error=outcome.error_message or "")

class Row(BaseModel):
    """One tick: a UTC timestamp and one sample per target, in registry order"""
    timestamp: datetime
    samples: List[SampleResult]

    @property
    def width(self) -> int:
        return 1 + 3 * len(self.samples)
