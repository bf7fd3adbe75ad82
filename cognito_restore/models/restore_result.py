"""
Data models for restore operation results.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Dict, Any
from enum import Enum


class RestoreStatus(Enum):
    """Status enumeration for restore phases."""
    SUCCESS = "success"
    FAILED = "failed"
    PARTIAL = "partial"
    SKIPPED = "skipped"


@dataclass
class RestoreResult:
    """Result of a single restore phase."""

    phase: str
    success: bool
    items_processed: int
    items_failed: int
    error_messages: List[str] = field(default_factory=list)
    execution_time: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)
    status: RestoreStatus = RestoreStatus.SUCCESS
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_error(self, error_message: str) -> None:
        """Add an error message to the result."""
        self.error_messages.append(error_message)
        self.items_failed += 1
        if self.items_processed > 0:
            self.status = RestoreStatus.PARTIAL
        else:
            self.status = RestoreStatus.FAILED
            self.success = False

    def mark_failed(self, error_message: str) -> None:
        """Record a fatal error for the phase."""
        self.error_messages.append(error_message)
        self.status = RestoreStatus.FAILED
        self.success = False


@dataclass
class RestoreReport:
    """Report of all phases run by one restore invocation."""

    start_time: datetime
    end_time: datetime
    results: List[RestoreResult] = field(default_factory=list)

    @property
    def total_execution_time(self) -> float:
        return (self.end_time - self.start_time).total_seconds()

    @property
    def total_phases(self) -> int:
        return len(self.results)

    @property
    def successful_phases(self) -> int:
        return sum(1 for r in self.results if r.status == RestoreStatus.SUCCESS)

    @property
    def failed_phases(self) -> int:
        return sum(1 for r in self.results if r.status == RestoreStatus.FAILED)

    @property
    def partial_phases(self) -> int:
        return sum(1 for r in self.results if r.status == RestoreStatus.PARTIAL)

    @property
    def success_rate(self) -> float:
        """Calculate the share of executed phases that fully succeeded."""
        executed = [r for r in self.results if r.status != RestoreStatus.SKIPPED]
        if not executed:
            return 0.0
        return (self.successful_phases / len(executed)) * 100

    def get_result(self, phase: str) -> Optional[RestoreResult]:
        """Return the result recorded for a phase, if any."""
        for result in self.results:
            if result.phase == phase:
                return result
        return None


@dataclass
class InvocationResponse:
    """Response returned at the invocation boundary."""

    message: str
    error: Optional[Exception] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        response = {'answer': self.message}
        if self.error is not None:
            response['error'] = str(self.error)
        return response
