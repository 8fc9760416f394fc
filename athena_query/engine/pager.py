"""
Paginated result collection
"""

from typing import Dict, List, AsyncIterator

from ..core import ExecutionHandle, ResultPage, MaterializedTable, ServiceError
from .base import AthenaComponent

DEFAULT_PAGE_SIZE = 100
# Athena's upper bound for GetQueryResults MaxResults
MAX_PAGE_SIZE = 1000


def unique_column_names(header: List[str]) -> List[str]:
    """
    Make header names unique

    Repeated names get a '.1', '.2', ... suffix in order of appearance,
    e.g. ['a', 'a', 'b'] -> ['a', 'a.1', 'b'].
    """
    seen: Dict[str, int] = {}
    taken = set(header)
    names = []
    for name in header:
        if name not in seen:
            seen[name] = 0
            names.append(name)
            continue
        count = seen[name]
        candidate = name
        while candidate in taken:
            count += 1
            candidate = f"{name}.{count}"
        seen[name] = count
        taken.add(candidate)
        names.append(candidate)
    return names


class ResultPager(AthenaComponent):
    """
    Walks get_query_results pages and builds a columnar table

    Row 0 of the first page is the header row; every later row, on every
    page, is data.
    """

    def __init__(self, athena_client, page_size: int = DEFAULT_PAGE_SIZE, **kwargs):
        super().__init__(athena_client, **kwargs)
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")
        self.page_size = page_size

    async def fetch_page(self, handle: ExecutionHandle, next_token: str = None) -> ResultPage:
        """Fetch one result page"""
        params = {'QueryExecutionId': handle, 'MaxResults': self.page_size}
        if next_token:
            params['NextToken'] = next_token
        response = await self._call('GetQueryResults', 'get_query_results', **params)
        return ResultPage.from_response(response)

    async def iter_pages(self, handle: ExecutionHandle) -> AsyncIterator[ResultPage]:
        """Yield raw pages until Athena stops returning a NextToken"""
        page = await self.fetch_page(handle)
        yield page
        while page.next_token:
            page = await self.fetch_page(handle, page.next_token)
            yield page

    async def collect(self, handle: ExecutionHandle) -> MaterializedTable:
        """
        Materialize every page of a succeeded execution

        Args:
            handle: Execution whose results to read

        Returns:
            MaterializedTable (zero rows if only a header came back,
            zero columns if no rows came back at all)

        Raises:
            ServiceError: API failure, or a row whose width differs from the header
        """
        columns: List[str] = []
        vectors: List[List[str]] = []
        page_count = 0

        async for page in self.iter_pages(handle):
            page_count += 1
            rows = page.rows
            if page_count == 1:
                if not rows:
                    self._emit(f"Query {handle} returned no rows")
                    return MaterializedTable()
                columns = unique_column_names(rows[0])
                vectors = [[] for _ in columns]
                rows = rows[1:]

            self._emit(f"Processing page {page_count}: {len(rows)} rows")
            for row in rows:
                if len(row) != len(columns):
                    raise ServiceError(
                        'GetQueryResults',
                        message=(f"Row on page {page_count} has {len(row)} cells, "
                                 f"expected {len(columns)}"),
                        execution_id=handle
                    )
                for vector, cell in zip(vectors, row):
                    vector.append(cell)

        table = MaterializedTable(columns=columns, data=dict(zip(columns, vectors)))
        self._emit(f"Finished processing {page_count} pages, total rows: {table.num_rows}")
        return table
