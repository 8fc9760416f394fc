"""
Query submission and completion polling
"""

import asyncio
from typing import Optional

from ..core import (
    QuerySubmission, ExecutionHandle, ExecutionStatus,
    ServiceError, StatusUnavailable, PollingCancelled, PollingTimeout
)
from .base import AthenaComponent

DEFAULT_POLL_INTERVAL = 1.0


class ExecutionPoller(AthenaComponent):
    """
    Submits queries and waits for them to reach a terminal state

    Without a timeout or cancel event, polling continues until Athena itself
    finishes or kills the query.
    """

    def __init__(self, athena_client, poll_interval: float = DEFAULT_POLL_INTERVAL,
                 stop_on_cancel: bool = True, **kwargs):
        """
        Initialize poller

        Args:
            athena_client: boto3 Athena client
            poll_interval: Seconds between status checks
            stop_on_cancel: Issue stop_query_execution when polling is abandoned
        """
        super().__init__(athena_client, **kwargs)
        self.poll_interval = poll_interval
        self.stop_on_cancel = stop_on_cancel

    async def submit(self, submission: QuerySubmission) -> ExecutionHandle:
        """
        Start a query execution

        Args:
            submission: Query to run

        Returns:
            Athena QueryExecutionId
        """
        response = await self._call(
            'StartQueryExecution', 'start_query_execution',
            QueryString=submission.statement,
            QueryExecutionContext={
                'Database': submission.database,
                'Catalog': submission.catalog
            },
            ResultConfiguration={'OutputLocation': submission.output_location},
            WorkGroup=submission.workgroup,
            ResultReuseConfiguration=submission.reuse_configuration()
        )
        return response['QueryExecutionId']

    async def get_status(self, handle: ExecutionHandle) -> ExecutionStatus:
        """Fetch the current execution status once"""
        try:
            response = await self._call('GetQueryExecution', 'get_query_execution',
                                        QueryExecutionId=handle)
        except ServiceError as e:
            raise StatusUnavailable(handle, e.cause, profile=self.profile) from e.cause
        return ExecutionStatus.from_response(response)

    async def await_terminal(self, handle: ExecutionHandle,
                             cancel_event: Optional[asyncio.Event] = None,
                             timeout: Optional[float] = None) -> ExecutionStatus:
        """
        Poll until the execution is SUCCEEDED, FAILED or CANCELLED

        A failing status call is raised immediately; only a QUEUED or RUNNING
        state causes another round.

        Args:
            handle: Execution to wait for
            cancel_event: Set it to stop polling
            timeout: Give up after this many seconds

        Returns:
            Terminal ExecutionStatus (statistics set on success, reason on failure)

        Raises:
            StatusUnavailable: A status call failed
            PollingCancelled: cancel_event was set
            PollingTimeout: timeout expired
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout if timeout is not None else None

        while True:
            status = await self.get_status(handle)
            if status.state.is_terminal:
                return status

            delay = self.poll_interval
            if deadline is not None:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    stop_error = await self._abandon(handle)
                    raise PollingTimeout(
                        f"Gave up waiting after {timeout:g}s (last state {status.state.value})",
                        execution_id=handle
                    ) from stop_error
                delay = min(delay, remaining)

            if await self._sleep(delay, cancel_event):
                stop_error = await self._abandon(handle)
                raise PollingCancelled(
                    f"Polling cancelled (last state {status.state.value})",
                    execution_id=handle
                ) from stop_error

    async def _sleep(self, delay: float, cancel_event: Optional[asyncio.Event]) -> bool:
        """Suspend this task for delay seconds; True if cancel_event fired"""
        if cancel_event is None:
            await asyncio.sleep(delay)
            return False
        if cancel_event.is_set():
            return True
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    async def _abandon(self, handle: ExecutionHandle) -> Optional[ServiceError]:
        """Stop the remote query if configured; a failed stop is returned, not raised"""
        if not self.stop_on_cancel:
            return None
        self._emit(f"Stopping query execution {handle}")
        try:
            await self.cancel(handle)
        except ServiceError as e:
            self._emit(f"Could not stop query execution {handle}: {e.message}")
            return e
        return None

    async def cancel(self, handle: ExecutionHandle):
        """Ask Athena to stop an execution"""
        await self._call('StopQueryExecution', 'stop_query_execution',
                         QueryExecutionId=handle)
