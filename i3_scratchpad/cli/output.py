"""Output formatting for command results.

Formats:
    text  key=value pairs, one record per line
    json  one compact JSON object per line
    tsv   tab-separated, header on first write
    csv   comma-separated, header on first write

Examples:
    >>> fmt = OutputFormatter("text")
    >>> fmt.write(OutputEvent(command="list", window_id=94, app_name="kitty"))
    command=list action="" window_id=94 app_name=kitty ...
"""

import csv
import sys
from typing import Iterable, Optional, TextIO

from ..errors import ErrorCode, ScratchpadError
from ..models.output import FIELDS, OutputEvent


OUTPUT_FORMATS = ("text", "json", "tsv", "csv")


def validate_format(name: str) -> str:
    """Normalize and check an --output value.

    Raises:
        ScratchpadError: If the format is unsupported
    """
    normalized = (name or "").strip().lower()
    if normalized not in OUTPUT_FORMATS:
        raise ScratchpadError(
            f"unsupported output format '{name}' (choose from {', '.join(OUTPUT_FORMATS)})",
            code=ErrorCode.INVALID_ARGUMENT,
        )
    return normalized


def quote_text_value(value: str) -> str:
    """Quote a value for text output when it is empty or contains whitespace or quotes."""
    if value == "":
        return '""'
    if any(ch in value for ch in (" ", "\t", '"')):
        return '"' + value.replace('"', '\\"') + '"'
    return value


class OutputFormatter:
    """Writes OutputEvent records in one format to a stream."""

    def __init__(self, output_format: str = "text", stream: Optional[TextIO] = None):
        """Initialize output formatter.

        Args:
            output_format: text, json, tsv or csv
            stream: Destination (default: stdout)

        Raises:
            ScratchpadError: If the format is unsupported
        """
        self.format = validate_format(output_format)
        self.stream = stream or sys.stdout
        self._header_written = False
        self._writer = None
        if self.format in ("tsv", "csv"):
            delimiter = "\t" if self.format == "tsv" else ","
            self._writer = csv.writer(self.stream, delimiter=delimiter, lineterminator="\n")

    def write(self, event: OutputEvent) -> None:
        if self.format == "json":
            self.stream.write(event.model_dump_json() + "\n")
        elif self.format == "text":
            row = event.as_row()
            self.stream.write(" ".join(f"{name}={quote_text_value(row[name])}" for name in FIELDS) + "\n")
        else:
            if not self._header_written:
                self._writer.writerow(FIELDS)
                self._header_written = True
            row = event.as_row()
            self._writer.writerow([row[name] for name in FIELDS])

    def write_all(self, events: Iterable[OutputEvent]) -> None:
        for event in events:
            self.write(event)
        self.stream.flush()
