import csv
import io
import logging

import pandas as pd


logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Raised when delimited text cannot be tokenized."""


class Table:
    """Parsed headers and rows. Treated as immutable once built.

    Rows are kept exactly as tokenized, so a short or long record stays
    short or long. Column-indexed access goes through ``cell`` or ``frame``,
    where a missing cell reads as an empty string.
    """

    def __init__(self, headers, rows):
        self.headers: list[str] = list(headers)
        self.rows: list[list[str]] = list(rows)
        self._frame = None

    @classmethod
    def empty(cls) -> "Table":
        return cls([], [])

    @property
    def column_count(self) -> int:
        return len(self.headers)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def cell(self, row_idx: int, col_idx: int) -> str:
        row = self.rows[row_idx]
        if 0 <= col_idx < len(row):
            return row[col_idx]
        return ""

    @property
    def frame(self) -> pd.DataFrame:
        # positional columns; headers may repeat or be blank
        if self._frame is None:
            width = self.column_count
            padded = [(list(row) + [""] * width)[:width] for row in self.rows]
            if padded:
                self._frame = pd.DataFrame(padded, columns=range(width), dtype=object)
            else:
                self._frame = pd.DataFrame(columns=range(width), dtype=object)
        return self._frame

    def __repr__(self):
        return f"Table(columns={self.column_count}, rows={self.row_count})"


def _is_blank(record) -> bool:
    return not record or (len(record) == 1 and record[0] == "")


_PAD = " \t"
_LINE_ENDS = "\r\n"


def trim_unquoted(text: str) -> str:
    """Drop spaces and tabs around each field that sit outside quotes.

    Quoted content is copied untouched and line breaks are kept, so the csv
    reader still sees (and reports) the same lines. Text between a closing
    quote and the next delimiter that is not padding is left in place for
    the reader to reject.
    """
    out = []
    pending = ""
    state = "start"  # start | plain | quoted | closed | padded
    for ch in text:
        if state == "quoted":
            out.append(ch)
            if ch == '"':
                state = "closed"
            continue

        if ch == "," or ch in _LINE_ENDS:
            pending = ""
            out.append(ch)
            state = "start"
        elif ch in _PAD:
            if state in ("plain", "closed", "padded"):
                pending += ch
            if state == "closed":
                state = "padded"
        elif ch == '"' and state in ("start", "closed"):
            # opening quote, or the second half of a doubled quote
            out.append(ch)
            state = "quoted"
        else:
            out.append(pending + ch)
            pending = ""
            state = "plain"
    return "".join(out)


def parse(text: str) -> Table:
    """Tokenize comma-separated text into a header row and data rows."""
    reader = csv.reader(io.StringIO(trim_unquoted(text or "")), strict=True)
    records = []
    try:
        for record in reader:
            if _is_blank(record):
                continue
            records.append(record)
    except csv.Error as exc:
        logger.warning("Failed to parse delimited text near line %s: %s", reader.line_num, exc)
        raise ParseError(f"Failed to parse CSV: line {reader.line_num}: {exc}") from exc

    if not records:
        return Table.empty()

    table = Table(records[0], records[1:])
    logger.debug("Parsed %r", table)
    return table


def parse_file(path: str, encoding: str = "utf-8-sig") -> Table:
    with open(path, "r", encoding=encoding, newline="") as f:
        text = f.read()
    return parse(text)
