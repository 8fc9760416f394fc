"""
Core data models, types and errors
"""

from .submission import QuerySubmission, ExecutionHandle
from .execution import ExecutionState, ExecutionStatistics, ExecutionStatus, format_bytes
from .table import ResultPage, MaterializedTable, QueryResult
from .errors import (
    AthenaQueryError, ConfigError, ServiceError, StatusUnavailable, QueryFailed,
    PollingCancelled, PollingTimeout, InvalidQuery, InvalidResultUri, LocalIOError
)

__all__ = ['QuerySubmission', 'ExecutionHandle',
           'ExecutionState', 'ExecutionStatistics', 'ExecutionStatus', 'format_bytes',
           'ResultPage', 'MaterializedTable', 'QueryResult',
           'AthenaQueryError', 'ConfigError', 'ServiceError', 'StatusUnavailable',
           'QueryFailed', 'PollingCancelled', 'PollingTimeout', 'InvalidQuery',
           'InvalidResultUri', 'LocalIOError']
