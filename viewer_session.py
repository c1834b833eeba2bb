import logging
import os

from export_handler import ExportError, ExportHandler
from table_parser import ParseError, Table, parse, parse_file
from view_engine import Filter, ValidationError, ViewEngine
from view_requests import (
    ApplyFilter,
    ClearFilters,
    ClearSort,
    ExecuteQuery,
    ExportData,
    GetDisplayRows,
    LoadTable,
    OpenFile,
    Response,
    SetAllColumnsVisible,
    SetColumnVisibility,
    SetSort,
)


logger = logging.getLogger(__name__)

TITLE_PREFIX = "Table Viewer"
QUERY_NOT_IMPLEMENTED = "Query execution not implemented yet."


class ViewerSession:
    """One viewed document: its table, its engine and what the host should show.

    Loading another document throws the old engine away and builds a new one.
    """

    def __init__(self, config=None):
        self.config = dict(config or {})
        self.file_path: str | None = None
        self.title = TITLE_PREFIX
        self.error: str | None = None
        self.engine = ViewEngine()

    # ---------- loading ----------
    def load_text(self, text: str, source: str | None = None) -> bool:
        self.file_path = source
        try:
            table = parse(text)
        except ParseError as exc:
            self._show_error(exc)
            return False
        self._bind(table)
        return True

    def open_path(self, path: str) -> bool:
        self.file_path = path
        try:
            table = parse_file(path)
        except (ParseError, UnicodeDecodeError) as exc:
            self._show_error(exc)
            return False
        self._bind(table)
        return True

    def _bind(self, table: Table):
        self.engine = ViewEngine(table)
        self.error = None
        name = os.path.basename(self.file_path) if self.file_path else "untitled"
        self.title = f"{TITLE_PREFIX}: {name}"
        logger.info("Loaded %s: %r", name, table)

    def _show_error(self, exc):
        self.engine = ViewEngine()
        self.error = f"Error parsing CSV: {exc}"
        self.title = f"{TITLE_PREFIX}: Error"
        logger.warning("%s", self.error)

    # ---------- accessors ----------
    @property
    def table(self) -> Table:
        return self.engine.table

    @property
    def headers(self) -> list[str]:
        return self.engine.table.headers

    def has_error(self) -> bool:
        return self.error is not None

    def resolve_column(self, column) -> int:
        """Map a column index or header name to an index.

        Text matches a header exactly, then case-insensitively, and only
        then is read as a 0-based index, so numeric headers stay reachable.
        """
        if isinstance(column, int):
            return column
        text = str(column).strip()
        for idx, header in enumerate(self.headers):
            if header == text:
                return idx
        lowered = text.lower()
        for idx, header in enumerate(self.headers):
            if header.lower() == lowered:
                return idx
        if text.isdigit():
            return int(text)
        raise ValidationError(f"Unknown column: {text}")

    def row_count_message(self) -> str:
        count = self.engine.row_count
        return f"{count} row{'s' if count != 1 else ''}"

    # ---------- dispatch ----------
    def handle(self, request) -> Response:
        try:
            return self._dispatch(request)
        except (ValidationError, ExportError) as exc:
            logger.info("Rejected %s: %s", type(request).__name__, exc)
            return Response(ok=False, message=str(exc))
        except OSError as exc:
            logger.warning("%s failed: %s", type(request).__name__, exc)
            return Response(ok=False, message=f"{exc.strerror or exc}: {exc.filename or ''}".strip(": "))

    def _dispatch(self, request) -> Response:
        engine = self.engine

        if isinstance(request, LoadTable):
            ok = self.load_text(request.text, request.source)
            return self._rows_response(ok, self.error or self.row_count_message())

        if isinstance(request, OpenFile):
            ok = self.open_path(os.path.expanduser(request.path))
            return self._rows_response(ok, self.error or self.row_count_message())

        if isinstance(request, ApplyFilter):
            column = self.resolve_column(request.column)
            engine.apply_filter(Filter(column, request.operator, request.value))
            return self._rows_response(True, f"Filter applied ({self.row_count_message()})")

        if isinstance(request, ClearFilters):
            engine.clear_filters()
            return self._rows_response(True, "Filters cleared")

        if isinstance(request, SetSort):
            column = self.resolve_column(request.column)
            engine.set_sort(column)
            direction = "ascending" if engine.sort_spec.ascending else "descending"
            return self._rows_response(True, f"Sorted by {self.headers[column]} ({direction})")

        if isinstance(request, ClearSort):
            engine.set_sort(None)
            return self._rows_response(True, "Sort cleared")

        if isinstance(request, SetColumnVisibility):
            column = self.resolve_column(request.column)
            engine.set_column_visibility(column, request.visible)
            state = "shown" if request.visible else "hidden"
            return Response(ok=True, message=f"Column '{self.headers[column]}' {state}")

        if isinstance(request, SetAllColumnsVisible):
            engine.set_all_columns_visible(request.visible)
            state = "shown" if request.visible else "hidden"
            return Response(ok=True, message=f"All columns {state}")

        if isinstance(request, GetDisplayRows):
            return self._rows_response(True, self.row_count_message())

        if isinstance(request, ExportData):
            path = self.export(request.format, request.path)
            return Response(ok=True, message=f"Exported {self.row_count_message()} to {path}")

        if isinstance(request, ExecuteQuery):
            logger.info("Query requested: %s", request.query)
            return Response(ok=False, message=QUERY_NOT_IMPLEMENTED)

        raise ValidationError(f"Unsupported request: {type(request).__name__}")

    def _rows_response(self, ok: bool, message: str) -> Response:
        return Response(ok=ok, message=message, rows=self.engine.get_display_rows())

    # ---------- export ----------
    def export(self, fmt: str | None = None, path: str | None = None) -> str:
        if self.has_error():
            raise ExportError("Nothing to export")
        handler = ExportHandler(fmt or self.config.get("EXPORT_FORMAT", "csv"))
        target = path or handler.default_path(self.file_path, self.config.get("EXPORT_DIR"))
        return handler.write(self.engine.display_frame(), target)
