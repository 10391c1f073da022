"""
Identity normalization helpers used to compare export rows with target clients.

Every helper is total: absent input yields an empty string, never an error.
"""

from __future__ import annotations

import re

_NON_DIGIT = re.compile(r"[^0-9]")
# Spreadsheet forced-text wrapper: ="0123". The tokenizer strips the quote
# characters, so the bare =0123 remnant is unwrapped as well.
_EXCEL_TEXT = re.compile(r'^="(.*)"$|^=(.*)$', re.DOTALL)


def unwrap_excel_text(value: object | None) -> str:
    if value is None:
        return ""
    token = str(value)
    match = _EXCEL_TEXT.match(token.strip())
    if match is None:
        return token
    inner = match.group(1) if match.group(1) is not None else match.group(2)
    return inner


def normalize_phone(value: object | None) -> str:
    """Keep only the digits of a phone number."""

    if value is None:
        return ""
    return _NON_DIGIT.sub("", unwrap_excel_text(value))


def normalize_email(value: object | None) -> str:
    if value is None:
        return ""
    return unwrap_excel_text(value).strip().lower()


def normalize_name(value: object | None) -> str:
    if value is None:
        return ""
    return unwrap_excel_text(value).strip().lower()


def compose_full_name(full_name: object | None, first_name: object | None, last_name: object | None) -> str:
    """
    Prefer the export's single full-name column, falling back to first + last.
    """

    full = unwrap_excel_text(full_name).strip()
    if full:
        return full
    first = unwrap_excel_text(first_name).strip()
    last = unwrap_excel_text(last_name).strip()
    return f"{first} {last}".strip()
