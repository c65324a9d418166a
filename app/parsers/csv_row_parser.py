"""
app/parsers/csv_row_parser.py

Streaming CSV reader for clinic import files.
"""

from __future__ import annotations

import csv
from collections.abc import Iterator
from contextlib import contextmanager
from itertools import islice
from pathlib import Path
from typing import IO

from app.domain.clinic_import import RawRow

CSV_ENCODING = "utf-8-sig"


class MalformedInputError(ValueError):
    """
    Raised when the CSV stream cannot be decoded or tokenized.
    """


class CSVRowParser:
    """
    Turns a text stream with a header line into RawRow dicts.

    Quoting is strict: an unterminated quoted field is an error instead of
    being silently swallowed into the last cell.
    """

    def __init__(self, *, delimiter: str = ",") -> None:
        self._delimiter = delimiter

    @contextmanager
    def open(self, path: str | Path) -> Iterator[IO[str]]:
        """
        Open a CSV file as text; a UTF-8 BOM is accepted and dropped.
        """

        try:
            handle = open(path, encoding=CSV_ENCODING, newline="")
        except OSError as exc:
            raise MalformedInputError(f"CSV file could not be opened: {exc}") from exc
        try:
            yield handle
        finally:
            handle.close()

    def iter_rows(self, stream: IO[str]) -> Iterator[RawRow]:
        """
        Lazily yield one RawRow per data line.

        The generator is single-pass; a new stream is needed to read again.
        """

        reader = self._dict_reader(stream)
        try:
            for row in reader:
                # Cells beyond the header land under the None key.
                row.pop(None, None)  # type: ignore[call-overload]
                yield row
        except UnicodeDecodeError as exc:
            raise MalformedInputError("CSV must be UTF-8 encoded.") from exc
        except csv.Error as exc:
            raise MalformedInputError(
                f"Invalid CSV format near line {reader.line_num}: {exc}"
            ) from exc

    def read_preview(self, stream: IO[str], *, limit: int) -> tuple[tuple[str, ...], list[RawRow]]:
        """
        Return the header and at most ``limit`` rows from the top of the stream.
        """

        reader = self._dict_reader(stream)
        try:
            columns = tuple(reader.fieldnames or ())
            rows: list[RawRow] = []
            for row in islice(reader, max(0, limit)):
                row.pop(None, None)  # type: ignore[call-overload]
                rows.append(row)
        except UnicodeDecodeError as exc:
            raise MalformedInputError("CSV must be UTF-8 encoded.") from exc
        except csv.Error as exc:
            raise MalformedInputError(f"Invalid CSV format: {exc}") from exc
        return columns, rows

    def _dict_reader(self, stream: IO[str]) -> csv.DictReader:
        return csv.DictReader(stream, delimiter=self._delimiter, strict=True)

