"""
CSV tokenizer for backup exports.

Export files are produced by a third-party booking tool and are not strictly
RFC 4180: quotes only ever wrap whole fields and are never escaped, so the
parser simply toggles an "inside quotes" flag and drops the quote characters.
"""

from __future__ import annotations

from typing import Iterator

_BOM = "\ufeff"


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line into trimmed field values."""

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    fields.append("".join(current).strip())
    return fields


def _non_blank_lines(text: str) -> Iterator[str]:
    for line in text.split("\n"):
        line = line.rstrip("\r")
        if line.strip():
            yield line


def parse_csv_text(text: str) -> list[dict[str, str]]:
    """
    Tokenize raw export text into header-keyed records, in file order.

    Rows shorter than the header are padded with empty strings and surplus
    trailing values are ignored.
    """

    lines = list(_non_blank_lines(text or ""))
    if len(lines) < 2:
        return []

    headers = [header.strip() for header in split_csv_line(lines[0])]
    if headers:
        headers[0] = headers[0].lstrip(_BOM).strip()

    records: list[dict[str, str]] = []
    for line in lines[1:]:
        values = split_csv_line(line)
        record: dict[str, str] = {}
        for index, header in enumerate(headers):
            record[header] = values[index] if index < len(values) else ""
        records.append(record)
    return records
