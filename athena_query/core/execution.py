"""
Execution state and statistics
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any


class ExecutionState(Enum):
    """Athena query execution state"""
    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (ExecutionState.SUCCEEDED, ExecutionState.FAILED, ExecutionState.CANCELLED)

    @property
    def is_failure(self) -> bool:
        return self in (ExecutionState.FAILED, ExecutionState.CANCELLED)


_BYTE_UNITS = ['B', 'KB', 'MB', 'GB', 'TB', 'PB']


def format_bytes(num_bytes: int) -> str:
    """Format a byte count with decimal (1000-based) units, e.g. 12.35 MB"""
    value = float(num_bytes)
    for unit in _BYTE_UNITS:
        if abs(value) < 1000 or unit == _BYTE_UNITS[-1]:
            if unit == 'B':
                return f"{int(value)} B"
            return f"{value:.2f} {unit}"
        value /= 1000


@dataclass
class ExecutionStatistics:
    """
    Statistics reported for a succeeded execution

    Attributes:
        bytes_scanned: DataScannedInBytes
        engine_time: Engine execution time (seconds)
        queue_time: Time spent queued (seconds)
        planning_time: Query planning time (seconds)
    """
    bytes_scanned: int = 0
    engine_time: float = 0.0
    queue_time: float = 0.0
    planning_time: float = 0.0

    @classmethod
    def from_response(cls, stats: Dict[str, Any]) -> 'ExecutionStatistics':
        """Build from the Statistics block of get_query_execution"""
        return cls(
            bytes_scanned=stats.get('DataScannedInBytes', 0),
            engine_time=stats.get('EngineExecutionTimeInMillis', 0) / 1000,
            queue_time=stats.get('QueryQueueTimeInMillis', 0) / 1000,
            planning_time=stats.get('QueryPlanningTimeInMillis', 0) / 1000
        )

    @property
    def cache_hit(self) -> bool:
        """Athena reports zero bytes scanned when a previous result was reused"""
        return self.bytes_scanned == 0

    def describe_cache(self) -> str:
        if self.cache_hit:
            return "Results retrieved from cache"
        return f"Fresh query execution (scanned {format_bytes(self.bytes_scanned)})"


@dataclass
class ExecutionStatus:
    """
    Snapshot of one get_query_execution response

    Attributes:
        execution_id: Athena QueryExecutionId
        state: Current execution state
        statistics: Only set once the state is SUCCEEDED
        output_location: S3 URI of the result file
        reason: StateChangeReason reported by Athena
    """
    execution_id: str
    state: ExecutionState
    statistics: Optional[ExecutionStatistics] = None
    output_location: Optional[str] = None
    reason: Optional[str] = None
    statement: Optional[str] = None
    database: Optional[str] = None
    workgroup: Optional[str] = None
    submitted_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> 'ExecutionStatus':
        """Parse a get_query_execution response"""
        execution = response['QueryExecution']
        status = execution.get('Status', {})
        state = ExecutionState(status['State'])

        statistics = None
        if state == ExecutionState.SUCCEEDED:
            statistics = ExecutionStatistics.from_response(execution.get('Statistics', {}))

        return cls(
            execution_id=execution['QueryExecutionId'],
            state=state,
            statistics=statistics,
            output_location=execution.get('ResultConfiguration', {}).get('OutputLocation'),
            reason=status.get('StateChangeReason'),
            statement=execution.get('Query'),
            database=execution.get('QueryExecutionContext', {}).get('Database'),
            workgroup=execution.get('WorkGroup'),
            submitted_at=status.get('SubmissionDateTime'),
            completed_at=status.get('CompletionDateTime')
        )

    @property
    def duration(self) -> Optional[float]:
        """Wall-clock seconds from submission to completion, if both are known"""
        if self.submitted_at is None or self.completed_at is None:
            return None
        return (self.completed_at - self.submitted_at).total_seconds()
