from datetime import datetime, timedelta

import pytest
from botocore.exceptions import NoCredentialsError

from athena_query.core import (
    QuerySubmission, ExecutionState, ExecutionStatistics, ExecutionStatus,
    MaterializedTable, ResultPage, ServiceError, QueryFailed, format_bytes
)


def test_submission_rejects_empty_statement():
    with pytest.raises(ValueError):
        QuerySubmission("   ", database="sales")


def test_submission_rejects_negative_reuse():
    with pytest.raises(ValueError):
        QuerySubmission("SELECT 1", reuse_seconds=-1)


def test_zero_reuse_keeps_reuse_enabled():
    config = QuerySubmission("SELECT 1", reuse_seconds=0).reuse_configuration()

    assert config == {"ResultReuseByAgeConfiguration": {"Enabled": True, "MaxAgeInMinutes": 0}}


@pytest.mark.parametrize("minutes", [0, 1, 2.5, 59.99, 90])
def test_max_age_is_floor_of_minutes(minutes):
    submission = QuerySubmission("SELECT 1", reuse_seconds=minutes * 60)
    assert submission.reuse_max_age_minutes == int(minutes)


def test_states():
    assert not ExecutionState.QUEUED.is_terminal
    assert not ExecutionState.RUNNING.is_terminal
    assert ExecutionState.SUCCEEDED.is_terminal
    assert not ExecutionState.SUCCEEDED.is_failure
    assert ExecutionState.FAILED.is_failure
    assert ExecutionState.CANCELLED.is_failure


@pytest.mark.parametrize("num_bytes,text", [
    (0, "0 B"),
    (999, "999 B"),
    (1000, "1.00 KB"),
    (1500000, "1.50 MB"),
    (2 * 10 ** 12, "2.00 TB"),
])
def test_format_bytes(num_bytes, text):
    assert format_bytes(num_bytes) == text


def test_cache_signal_is_zero_bytes_scanned():
    assert ExecutionStatistics(bytes_scanned=0).cache_hit
    assert not ExecutionStatistics(bytes_scanned=1).cache_hit


def test_status_from_response_with_timestamps():
    submitted = datetime(2024, 1, 1, 12, 0, 0)
    response = {
        "QueryExecution": {
            "QueryExecutionId": "qid-9",
            "Status": {
                "State": "SUCCEEDED",
                "SubmissionDateTime": submitted,
                "CompletionDateTime": submitted + timedelta(seconds=4),
            },
        }
    }

    status = ExecutionStatus.from_response(response)

    assert status.execution_id == "qid-9"
    assert status.statistics == ExecutionStatistics()
    assert status.output_location is None
    assert status.duration == 4.0


def test_result_page_from_response():
    page = ResultPage.from_response({
        "ResultSet": {"Rows": [{"Data": [{"VarCharValue": "a"}, {}]}]},
        "NextToken": "t1",
    })

    assert page.rows == [["a", ""]]
    assert page.next_token == "t1"


def test_table_helpers():
    table = MaterializedTable(columns=["id", "name"],
                              data={"id": ["1", "2", "3"], "name": ["a", "b", "c"]})

    assert len(table) == 3
    assert table.num_columns == 2
    assert list(table.rows()) == [["1", "a"], ["2", "b"], ["3", "c"]]
    assert table.head(2).to_records() == [{"id": "1", "name": "a"}, {"id": "2", "name": "b"}]
    assert len(MaterializedTable()) == 0


def test_auth_error_hint(client_error):
    error = ServiceError("GetQueryExecution", client_error("ExpiredTokenException"),
                         profile="analytics")

    assert error.is_auth_error
    assert "aws sso login --profile analytics" in str(error)


def test_missing_credentials_hint():
    error = ServiceError("StartQueryExecution", NoCredentialsError())

    assert error.is_auth_error
    assert "Credentials may be expired" in str(error)


def test_non_auth_error_has_no_hint(client_error):
    error = ServiceError("GetQueryResults", client_error("InternalServerException"))

    assert not error.is_auth_error
    assert "aws sso login" not in str(error)


def test_query_failed_message():
    error = QueryFailed(ExecutionState.FAILED, "SYNTAX_ERROR", execution_id="qid-1")

    assert str(error) == "Query did not succeed (FAILED): SYNTAX_ERROR (execution qid-1)"
    assert "no reason given" in str(QueryFailed(ExecutionState.CANCELLED))
