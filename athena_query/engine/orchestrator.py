"""
Query orchestration: submit -> poll -> paginate

Also the entry point for downloading a finished query's result file.
"""

import asyncio
from pathlib import Path
from typing import Optional, Callable

from ..core import (
    QuerySubmission, ExecutionHandle, ExecutionStatus, ExecutionState,
    MaterializedTable, QueryResult, AthenaQueryError, ConfigError, QueryFailed,
    InvalidResultUri
)
from ..aws import create_client
from ..storage import ResultLocator, ObjectFetcher
from ..validation import validate_query_syntax
from .poller import ExecutionPoller, DEFAULT_POLL_INTERVAL
from .pager import ResultPager, DEFAULT_PAGE_SIZE


class QueryOrchestrator:
    """
    Runs Athena queries end to end

    execute() never touches S3; download() is the only call that reads the
    result file from the object store.
    """

    def __init__(self, athena_client, s3_client=None,
                 page_size: int = DEFAULT_PAGE_SIZE,
                 poll_interval: float = DEFAULT_POLL_INTERVAL,
                 validate_sql: bool = True,
                 stop_on_cancel: bool = True,
                 progress: Optional[Callable[[str], None]] = print,
                 name: str = 'athena',
                 profile: Optional[str] = None):
        """
        Initialize orchestrator

        Args:
            athena_client: boto3 Athena client
            s3_client: boto3 S3 client (only needed for download)
            page_size: Rows per get_query_results call
            poll_interval: Seconds between status checks
            validate_sql: Parse SQL locally before submitting
            stop_on_cancel: Stop the remote query when polling is abandoned
            progress: Sink for progress lines (None to silence)
            name: Prefix for progress lines
            profile: AWS profile, used in credential hints
        """
        self.name = name
        self.progress = progress
        self.validate_sql = validate_sql

        common = dict(progress=progress, name=name, profile=profile)
        self.poller = ExecutionPoller(athena_client, poll_interval=poll_interval,
                                      stop_on_cancel=stop_on_cancel, **common)
        self.pager = ResultPager(athena_client, page_size=page_size, **common)
        self.locator = ResultLocator()
        self.fetcher = None
        if s3_client is not None:
            self.fetcher = ObjectFetcher(s3_client, locator=self.locator, progress=progress,
                                         name=name, profile=profile)

    @classmethod
    def from_settings(cls, settings, **kwargs) -> 'QueryOrchestrator':
        """
        Build an orchestrator with clients for the configured profile and region

        Args:
            settings: Resolved config.Settings
            **kwargs: Overrides for the constructor
        """
        kwargs.setdefault('page_size', settings.page_size)
        kwargs.setdefault('poll_interval', settings.poll_interval)
        kwargs.setdefault('profile', settings.profile)
        return cls(
            create_client('athena', settings.profile, settings.region),
            create_client('s3', settings.profile, settings.region),
            **kwargs
        )

    def _emit(self, message: str):
        if self.progress:
            self.progress(f"[{self.name}] {message}")

    async def execute(self, submission: QuerySubmission,
                      cancel_event: Optional[asyncio.Event] = None,
                      timeout: Optional[float] = None) -> MaterializedTable:
        """
        Run a query and return its result table

        Args:
            submission: Query to run
            cancel_event: Set it to stop waiting for the query
            timeout: Stop waiting after this many seconds

        Returns:
            MaterializedTable

        Raises:
            ConfigError: No database was resolved
            InvalidQuery: SQL failed local validation
            QueryFailed: Query ended FAILED or CANCELLED
            ServiceError: Athena API failure
            PollingCancelled: cancel_event fired or timeout expired
        """
        result = await self.run(submission, cancel_event=cancel_event, timeout=timeout)
        return result.table

    async def run(self, submission: QuerySubmission,
                  cancel_event: Optional[asyncio.Event] = None,
                  timeout: Optional[float] = None) -> QueryResult:
        """Same as execute(), also returning the execution id and terminal status"""
        if not submission.database:
            raise ConfigError("Database name is required but was not provided")
        if self.validate_sql:
            validate_query_syntax(submission.statement)

        self._emit(f"Executing query: {submission.statement}")
        handle = await self.poller.submit(submission)
        self._emit(f"Query execution ID: {handle}")

        try:
            status = await self.poller.await_terminal(handle, cancel_event=cancel_event,
                                                      timeout=timeout)
            if status.state.is_failure:
                raise QueryFailed(status.state, status.reason)

            if status.output_location:
                self._emit(f"Results S3 path: {status.output_location}")
            if status.statistics:
                self._emit(f"Query cache status: {status.statistics.describe_cache()}")

            table = await self.pager.collect(handle)
        except AthenaQueryError as e:
            _attach(e, handle)
            raise

        return QueryResult(execution_id=handle, status=status, table=table)

    async def inspect(self, execution_id: ExecutionHandle) -> ExecutionStatus:
        """Look up one execution without waiting for it"""
        return await self.poller.get_status(execution_id)

    async def download(self, execution_id: ExecutionHandle, destination_dir: str) -> Path:
        """
        Download the result file of a succeeded execution

        Args:
            execution_id: Athena QueryExecutionId
            destination_dir: Local directory to save into

        Returns:
            Absolute path of the downloaded file

        Raises:
            QueryFailed: Execution is not SUCCEEDED
            InvalidResultUri: No usable output location
            LocalIOError: Local write failure
            ServiceError: Athena or S3 failure
        """
        if self.fetcher is None:
            raise ConfigError("An S3 client is required to download results")

        status = await self.inspect(execution_id)
        try:
            if status.state != ExecutionState.SUCCEEDED:
                raise QueryFailed(status.state, status.reason)
            if not status.output_location:
                raise InvalidResultUri('', "no output location recorded for query")

            self._emit(f"S3 output location: {status.output_location}")
            return await self.fetcher.fetch(status.output_location, destination_dir)
        except AthenaQueryError as e:
            _attach(e, execution_id)
            raise


def _attach(error: AthenaQueryError, execution_id: ExecutionHandle):
    if error.execution_id is None:
        error.execution_id = execution_id


def run_query(submission: QuerySubmission, orchestrator: Optional[QueryOrchestrator] = None,
              settings=None, **kwargs) -> MaterializedTable:
    """
    Blocking "run query, get table" call

    Args:
        submission: Query to run
        orchestrator: Existing orchestrator (built from settings if None)
        settings: Resolved config.Settings used to build an orchestrator
        **kwargs: Forwarded to QueryOrchestrator.execute (cancel_event, timeout)

    Returns:
        MaterializedTable
    """
    if orchestrator is None:
        if settings is None:
            raise ConfigError("run_query needs an orchestrator or settings")
        orchestrator = QueryOrchestrator.from_settings(settings)
    return asyncio.run(orchestrator.execute(submission, **kwargs))
