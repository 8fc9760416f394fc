"""
Query submission model
"""

from dataclasses import dataclass
from typing import Optional

# Athena QueryExecutionId
ExecutionHandle = str


@dataclass(frozen=True)
class QuerySubmission:
    """
    One query to run on Athena

    Built once per invocation from resolved settings and consumed by a single
    submit call.

    Attributes:
        statement: SQL text
        database: Target database (None until resolved)
        workgroup: Athena workgroup
        reuse_seconds: How old a cached result may be and still be reused
        output_location: S3 prefix Athena writes results to
        catalog: Data catalog the database lives in
    """
    statement: str
    database: Optional[str] = None
    workgroup: str = 'primary'
    reuse_seconds: float = 3600
    output_location: str = 's3://athena-query-results/'
    catalog: str = 'AwsDataCatalog'

    def __post_init__(self):
        if not self.statement or not self.statement.strip():
            raise ValueError("Query statement must not be empty")
        if self.reuse_seconds < 0:
            raise ValueError(f"Reuse duration must be >= 0, got {self.reuse_seconds}")

    @property
    def reuse_max_age_minutes(self) -> int:
        """Result reuse max age in whole minutes (rounded down)"""
        return int(self.reuse_seconds // 60)

    def reuse_configuration(self) -> dict:
        """
        Build the ResultReuseConfiguration for start_query_execution

        Reuse is always marked enabled. A max age of 0 makes Athena skip
        reuse on its side.
        """
        return {
            'ResultReuseByAgeConfiguration': {
                'Enabled': True,
                'MaxAgeInMinutes': self.reuse_max_age_minutes
            }
        }
