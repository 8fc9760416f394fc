"""
Error types

Every error raised by the engine derives from AthenaQueryError. Components
raise these where the problem is detected; the orchestrator only attaches the
execution id.
"""

from typing import Optional

from .execution import ExecutionState

# botocore error codes that mean the caller's credentials are the problem
AUTH_ERROR_CODES = {
    'AccessDenied', 'AccessDeniedException', 'ExpiredToken', 'ExpiredTokenException',
    'ForbiddenException', 'InvalidClientTokenId', 'UnrecognizedClientException',
    'UnauthorizedException'
}


class AthenaQueryError(Exception):
    """Base class for all athena_query errors"""

    def __init__(self, message: str, execution_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.execution_id = execution_id

    def __str__(self) -> str:
        if self.execution_id:
            return f"{self.message} (execution {self.execution_id})"
        return self.message


class ConfigError(AthenaQueryError):
    """A required setting is missing or invalid"""


class ServiceError(AthenaQueryError):
    """
    Athena or S3 API call failed

    Attributes:
        operation: API operation name (e.g. GetQueryResults)
        cause: Underlying botocore exception, if any
    """

    def __init__(self, operation: str, cause: Optional[BaseException] = None,
                 message: Optional[str] = None, execution_id: Optional[str] = None,
                 profile: Optional[str] = None):
        self.operation = operation
        self.cause = cause
        self.profile = profile
        if message is None:
            message = f"{operation} failed: {cause}"
            if self.is_auth_error:
                message += self._auth_hint()
        super().__init__(message, execution_id)

    @property
    def error_code(self) -> Optional[str]:
        response = getattr(self.cause, 'response', None)
        if not isinstance(response, dict):
            return None
        return response.get('Error', {}).get('Code')

    @property
    def is_auth_error(self) -> bool:
        if self.error_code in AUTH_ERROR_CODES:
            return True
        # NoCredentialsError and friends carry no error code
        return type(self.cause).__name__ in ('NoCredentialsError', 'PartialCredentialsError',
                                             'TokenRetrievalError', 'SSOTokenLoadError')

    def _auth_hint(self) -> str:
        if self.profile:
            return f". Credentials may be expired; run: aws sso login --profile {self.profile}"
        return ". Credentials may be expired; set valid AWS credentials or configure a profile"


class StatusUnavailable(ServiceError):
    """Polling could not determine the execution status"""

    def __init__(self, execution_id: str, cause: Optional[BaseException] = None,
                 profile: Optional[str] = None):
        super().__init__(
            'GetQueryExecution', cause,
            message=f"Could not determine status of query {execution_id}: {cause}",
            execution_id=execution_id, profile=profile
        )


class QueryFailed(AthenaQueryError):
    """
    The query itself did not succeed

    Attributes:
        state: FAILED or CANCELLED (or a non-terminal state for download)
        reason: StateChangeReason reported by Athena
    """

    def __init__(self, state: ExecutionState, reason: Optional[str] = None,
                 execution_id: Optional[str] = None):
        self.state = state
        self.reason = reason
        if reason:
            message = f"Query did not succeed ({state.value}): {reason}"
        else:
            message = f"Query did not succeed ({state.value}), no reason given"
        super().__init__(message, execution_id)


class PollingCancelled(AthenaQueryError):
    """Polling was stopped by the caller before the query finished"""


class PollingTimeout(PollingCancelled):
    """Polling deadline expired before the query finished"""


class InvalidQuery(AthenaQueryError):
    """SQL failed local validation"""


class InvalidResultUri(AthenaQueryError):
    """Result location could not be parsed or has no file name"""

    def __init__(self, uri: str, reason: str, execution_id: Optional[str] = None):
        self.uri = uri
        self.reason = reason
        super().__init__(f"Invalid result URI '{uri}': {reason}", execution_id)


class LocalIOError(AthenaQueryError):
    """Local filesystem failure while saving a download"""

    def __init__(self, path: str, reason: str, execution_id: Optional[str] = None):
        self.path = path
        super().__init__(f"{reason}: {path}", execution_id)
