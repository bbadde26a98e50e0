"""
Structured output for parsed entries.

`flakenotes parse` prints entries as JSON Lines by default, or as a JSON
array, YAML document, CSV or TSV. Nested fields (the "from"/"to" pins of
an update) are flattened with dotted keys for the tabular formats.
"""

import csv
import io
import json
from typing import Any, Dict, Iterable, Iterator, List, Optional

import yaml

FORMATS = ('jsonl', 'json', 'yaml', 'csv', 'tsv')

# Column order for CSV/TSV when no --fields are given
DEFAULT_FIELDS = [
    'type', 'name', 'kind', 'follows',
    'provider', 'repository', 'commit', 'date',
    'from.provider', 'from.repository', 'from.commit', 'from.date',
    'to.provider', 'to.repository', 'to.commit', 'to.date',
    'diff_url',
]


def format_entries(entries: Iterable[Any], format: str,
                   fields: Optional[List[str]] = None) -> Iterator[str]:
    """
    Format entries according to the specified format.

    Args:
        entries: Objects with to_dict(), or plain dicts
        format: One of FORMATS
        fields: Columns to include (CSV/TSV only)

    Yields:
        Formatted strings for output
    """
    rows = (_as_dict(entry) for entry in entries)

    if format == "jsonl":
        for row in rows:
            yield json.dumps(row, ensure_ascii=False)
    elif format == "json":
        yield json.dumps(list(rows), ensure_ascii=False, indent=2)
    elif format == "yaml":
        yield yaml.safe_dump(list(rows), default_flow_style=False,
                             allow_unicode=True, sort_keys=False).rstrip("\n")
    elif format == "csv":
        yield from _format_delimited(rows, ",", fields)
    elif format == "tsv":
        yield from _format_delimited(rows, "\t", fields)
    else:
        raise ValueError(f"Unknown format: {format}")


def _as_dict(item: Any) -> Dict[str, Any]:
    if hasattr(item, 'to_dict'):
        return item.to_dict()
    return item


def _format_delimited(rows: Iterable[Dict[str, Any]], delimiter: str,
                      fields: Optional[List[str]] = None) -> Iterator[str]:
    flat_rows = [flatten_dict(row) for row in rows]
    if not flat_rows:
        return

    if fields is None:
        present = set()
        for row in flat_rows:
            present.update(row.keys())
        fields = [field for field in DEFAULT_FIELDS if field in present]
        fields += sorted(present - set(fields))

    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=fields, delimiter=delimiter,
                            extrasaction='ignore', lineterminator='\n')
    writer.writeheader()
    writer.writerows(flat_rows)

    yield output.getvalue().rstrip("\n")


def flatten_dict(d: Dict[str, Any], parent_key: str = '', sep: str = '.') -> Dict[str, Any]:
    """
    Flatten a nested dictionary.

    Example:
        {'from': {'commit': 'bd92e8ee'}} -> {'from.commit': 'bd92e8ee'}
    """
    items: list[tuple[str, Any]] = []
    for k, v in d.items():
        new_key = f"{parent_key}{sep}{k}" if parent_key else k

        if isinstance(v, dict):
            items.extend(flatten_dict(v, new_key, sep=sep).items())
        else:
            items.append((new_key, v))

    return dict(items)
