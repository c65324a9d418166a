"""
app/parsers package marker.
"""

from app.parsers.csv_row_parser import CSVRowParser, MalformedInputError

__all__ = ["CSVRowParser", "MalformedInputError"]
