"""
Base class for Athena engine components
"""

import asyncio
import functools
from typing import Dict, Any, Optional, Callable

from botocore.exceptions import BotoCoreError, ClientError

from ..core import ServiceError


class AthenaComponent:
    """
    Shared plumbing for components that talk to the Athena API

    boto3 clients are blocking, so every API call runs in the event loop's
    default executor and only the calling task waits on it.
    """

    def __init__(self, athena_client, progress: Optional[Callable[[str], None]] = print,
                 name: str = 'athena', profile: Optional[str] = None):
        """
        Initialize component

        Args:
            athena_client: boto3 Athena client
            progress: Sink for progress lines (None to silence)
            name: Prefix for progress lines
            profile: AWS profile, used in credential hints
        """
        self.athena_client = athena_client
        self.progress = progress
        self.name = name
        self.profile = profile

    def _emit(self, message: str):
        if self.progress:
            self.progress(f"[{self.name}] {message}")

    async def _call(self, operation: str, method: str, **kwargs) -> Dict[str, Any]:
        """
        Run one Athena API call off the event loop

        Args:
            operation: API operation name for error messages
            method: boto3 client method name
            **kwargs: Request parameters

        Returns:
            Response dict

        Raises:
            ServiceError: The call failed
        """
        loop = asyncio.get_running_loop()
        func = functools.partial(getattr(self.athena_client, method), **kwargs)
        try:
            return await loop.run_in_executor(None, func)
        except (BotoCoreError, ClientError) as e:
            raise ServiceError(operation, e, execution_id=kwargs.get('QueryExecutionId'),
                               profile=self.profile) from e
