"""
Query execution engine
"""

from .base import AthenaComponent
from .poller import ExecutionPoller
from .pager import ResultPager
from .orchestrator import QueryOrchestrator, run_query

__all__ = ['AthenaComponent', 'ExecutionPoller', 'ResultPager', 'QueryOrchestrator', 'run_query']
