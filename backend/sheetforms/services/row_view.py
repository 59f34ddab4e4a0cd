"""Search and sort over rows read from a spreadsheet"""
from typing import Dict, List, Optional

from sheetforms.core.errors import InvalidArgument


def positioned(rows: List[List[str]], header: bool = False) -> List[Dict]:
    """Pair each row with its row position; drop the header row if asked"""
    start = 1 if header else 0
    return [
        {'position': position, 'cells': rows[position]}
        for position in range(start, len(rows))
    ]


def search_rows(rows: List[Dict], query: Optional[str]) -> List[Dict]:
    """Keep rows where any cell contains the query, case-insensitively"""
    if not query:
        return rows
    needle = query.lower()
    return [
        row for row in rows
        if any(needle in str(cell).lower() for cell in row['cells'])
    ]


def sort_rows(rows: List[Dict], column: Optional[int], descending: bool = False) -> List[Dict]:
    """Sort by one column index; missing cells sort as empty strings"""
    if column is None:
        return rows
    if column < 0:
        raise InvalidArgument("Sort column must not be negative")

    def key(row):
        cells = row['cells']
        return str(cells[column]) if column < len(cells) else ''

    return sorted(rows, key=key, reverse=descending)
