
import pytest
from unittest.mock import MagicMock
from botocore.exceptions import ClientError


@pytest.fixture
def execution_response():
    """Returns a factory for get_query_execution responses."""
    def make(state, execution_id="qid-1", bytes_scanned=1500000, reason=None,
             output_location="s3://my-bucket/results/qid-1.csv"):
        status = {"State": state}
        if reason:
            status["StateChangeReason"] = reason
        return {
            "QueryExecution": {
                "QueryExecutionId": execution_id,
                "Query": "SELECT 1",
                "Status": status,
                "Statistics": {
                    "DataScannedInBytes": bytes_scanned,
                    "EngineExecutionTimeInMillis": 1200,
                    "QueryQueueTimeInMillis": 300,
                    "QueryPlanningTimeInMillis": 50,
                },
                "ResultConfiguration": {"OutputLocation": output_location},
                "QueryExecutionContext": {"Database": "sales"},
                "WorkGroup": "primary",
            }
        }
    return make


@pytest.fixture
def results_page():
    """Returns a factory for get_query_results responses."""
    def make(rows, next_token=None):
        response = {
            "ResultSet": {
                "Rows": [
                    {"Data": [{} if cell is None else {"VarCharValue": cell} for cell in row]}
                    for row in rows
                ]
            }
        }
        if next_token:
            response["NextToken"] = next_token
        return response
    return make


@pytest.fixture
def client_error():
    """Returns a factory for botocore ClientErrors."""
    def make(code="InternalServerException", operation="GetQueryExecution", message="boom"):
        return ClientError({"Error": {"Code": code, "Message": message}}, operation)
    return make


@pytest.fixture
def athena_client():
    """Returns a mocked boto3 Athena client."""
    client = MagicMock()
    client.start_query_execution.return_value = {"QueryExecutionId": "qid-1"}
    return client


@pytest.fixture
def s3_body():
    """Returns a factory for mocked StreamingBody objects."""
    def make(chunks):
        body = MagicMock()
        body.iter_chunks.return_value = iter(chunks)
        return body
    return make


@pytest.fixture
def progress_lines():
    """Collects progress output in a list."""
    return []
