"""
Result page and materialized table models
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Iterator

from .execution import ExecutionStatus


@dataclass
class ResultPage:
    """
    One get_query_results page

    Attributes:
        rows: Cell strings per row, in column order
        next_token: Continuation cursor (None on the last page)
    """
    rows: List[List[str]]
    next_token: Optional[str] = None

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> 'ResultPage':
        """Parse a get_query_results response; NULL cells become empty strings"""
        rows = []
        for row in response.get('ResultSet', {}).get('Rows', []):
            rows.append([cell.get('VarCharValue', '') for cell in row.get('Data', [])])
        return cls(rows=rows, next_token=response.get('NextToken'))


@dataclass
class MaterializedTable:
    """
    Columnar query result

    Every column vector has the same length: the total number of data rows.

    Attributes:
        columns: Column names in result order (unique)
        data: Column name -> cell strings
    """
    columns: List[str] = field(default_factory=list)
    data: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def num_rows(self) -> int:
        if not self.columns:
            return 0
        return len(self.data[self.columns[0]])

    @property
    def num_columns(self) -> int:
        return len(self.columns)

    def __len__(self) -> int:
        return self.num_rows

    def column(self, name: str) -> List[str]:
        """Get one column vector"""
        return self.data[name]

    def rows(self) -> Iterator[List[str]]:
        """Iterate rows in result order"""
        vectors = [self.data[name] for name in self.columns]
        for i in range(self.num_rows):
            yield [vector[i] for vector in vectors]

    def to_records(self) -> List[Dict[str, str]]:
        """Rows as dicts keyed by column name"""
        return [dict(zip(self.columns, row)) for row in self.rows()]

    def head(self, n: int = 10) -> 'MaterializedTable':
        """First n rows as a new table"""
        return MaterializedTable(
            columns=list(self.columns),
            data={name: self.data[name][:n] for name in self.columns}
        )


@dataclass
class QueryResult:
    """
    Outcome of a completed query

    Attributes:
        execution_id: Athena QueryExecutionId
        status: Terminal execution status
        table: Materialized result set
    """
    execution_id: str
    status: ExecutionStatus
    table: MaterializedTable
