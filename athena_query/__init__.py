"""
Run SQL on AWS Athena and get the result back as a table
"""

from .core import (
    QuerySubmission, ExecutionHandle, ExecutionState, ExecutionStatistics, ExecutionStatus,
    ResultPage, MaterializedTable, QueryResult,
    AthenaQueryError, ConfigError, ServiceError, StatusUnavailable, QueryFailed,
    PollingCancelled, PollingTimeout, InvalidQuery, InvalidResultUri, LocalIOError
)
from .config import Config, Settings, parse_duration
from .storage import ResultAddress, ResultLocator, ObjectFetcher
from .engine import ExecutionPoller, ResultPager, QueryOrchestrator, run_query
from .validation import validate_query_syntax

__version__ = "0.1.0"

__all__ = [
    'QuerySubmission', 'ExecutionHandle', 'ExecutionState', 'ExecutionStatistics',
    'ExecutionStatus', 'ResultPage', 'MaterializedTable', 'QueryResult',
    'AthenaQueryError', 'ConfigError', 'ServiceError', 'StatusUnavailable', 'QueryFailed',
    'PollingCancelled', 'PollingTimeout', 'InvalidQuery', 'InvalidResultUri', 'LocalIOError',
    'Config', 'Settings', 'parse_duration',
    'ResultAddress', 'ResultLocator', 'ObjectFetcher',
    'ExecutionPoller', 'ResultPager', 'QueryOrchestrator', 'run_query',
    'validate_query_syntax'
]
