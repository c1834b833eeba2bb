"""Typed requests accepted by a viewer session, and the command-bar grammar."""
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from view_engine import FilterOperator, ValidationError


ColumnRef = Union[int, str]

EXPORT_FORMATS = ("csv", "json", "excel")

OPERATOR_ALIASES = {
    "~": FilterOperator.CONTAINS,
    "=": FilterOperator.EQUALS,
    "==": FilterOperator.EQUALS,
    "^": FilterOperator.STARTS_WITH,
    "$": FilterOperator.ENDS_WITH,
    ">": FilterOperator.GREATER_THAN,
    "<": FilterOperator.LESS_THAN,
}

COMMAND_WORDS = [
    "clear",
    "export",
    "filter",
    "hide",
    "open",
    "query",
    "rows",
    "show",
    "sort",
    "unsort",
]


class RequestError(ValidationError):
    """Raised when command text does not describe a valid request."""


@dataclass(frozen=True)
class LoadTable:
    text: str
    source: Optional[str] = None


@dataclass(frozen=True)
class OpenFile:
    path: str


@dataclass(frozen=True)
class ApplyFilter:
    column: ColumnRef
    operator: FilterOperator
    value: str


@dataclass(frozen=True)
class ClearFilters:
    pass


@dataclass(frozen=True)
class SetSort:
    column: ColumnRef


@dataclass(frozen=True)
class ClearSort:
    pass


@dataclass(frozen=True)
class SetColumnVisibility:
    column: ColumnRef
    visible: bool


@dataclass(frozen=True)
class SetAllColumnsVisible:
    visible: bool


@dataclass(frozen=True)
class GetDisplayRows:
    pass


@dataclass(frozen=True)
class ExportData:
    format: str
    path: Optional[str] = None


@dataclass(frozen=True)
class ExecuteQuery:
    query: str


Request = Union[
    LoadTable,
    OpenFile,
    ApplyFilter,
    ClearFilters,
    SetSort,
    ClearSort,
    SetColumnVisibility,
    SetAllColumnsVisible,
    GetDisplayRows,
    ExportData,
    ExecuteQuery,
]


@dataclass
class Response:
    ok: bool
    message: str = ""
    rows: Optional[List[List[str]]] = None


def _split_head(text: str) -> Tuple[str, str]:
    """Split off the first token; a token may be wrapped in single or double quotes."""
    text = text.lstrip()
    if not text:
        return "", ""
    quote = text[0]
    if quote in ("'", '"'):
        end = text.find(quote, 1)
        if end == -1:
            raise RequestError(f"Unclosed quote in: {text}")
        return text[1:end], text[end + 1 :].lstrip()
    parts = text.split(None, 1)
    return parts[0], (parts[1] if len(parts) > 1 else "")


def _parse_operator(token: str) -> FilterOperator:
    if token in OPERATOR_ALIASES:
        return OPERATOR_ALIASES[token]
    try:
        return FilterOperator.from_value(token)
    except ValidationError as exc:
        raise RequestError(str(exc)) from exc


def _strip_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_command(text: str) -> Request:
    """Turn a command-bar line such as ``filter city contains york`` into a request."""
    verb, rest = _split_head(text or "")
    verb = verb.lower()
    if not verb:
        raise RequestError("No command")

    if verb == "filter":
        column, rest = _split_head(rest)
        op_token, rest = _split_head(rest)
        value = _strip_quotes(rest)
        if not column or not op_token or not value:
            raise RequestError("Usage: filter <column> <operator> <value>")
        return ApplyFilter(column, _parse_operator(op_token), value)

    if verb in ("clear", "clearfilters"):
        return ClearFilters()

    if verb == "sort":
        column, _ = _split_head(rest)
        if not column:
            raise RequestError("Usage: sort <column>")
        return SetSort(column)

    if verb == "unsort":
        return ClearSort()

    if verb in ("show", "hide"):
        visible = verb == "show"
        column, _ = _split_head(rest)
        if not column:
            raise RequestError(f"Usage: {verb} <column>|all")
        if column.lower() == "all":
            return SetAllColumnsVisible(visible)
        return SetColumnVisibility(column, visible)

    if verb == "export":
        fmt, rest = _split_head(rest)
        fmt = fmt.lower()
        if fmt not in EXPORT_FORMATS:
            raise RequestError(f"Usage: export <{'|'.join(EXPORT_FORMATS)}> [path]")
        path = _strip_quotes(rest) or None
        return ExportData(fmt, path)

    if verb in ("query", "sql"):
        query = rest.strip()
        if not query:
            raise RequestError("Usage: query <sql>")
        return ExecuteQuery(query)

    if verb == "open":
        path = _strip_quotes(rest)
        if not path:
            raise RequestError("Usage: open <path>")
        return OpenFile(path)

    if verb == "rows":
        return GetDisplayRows()

    raise RequestError(f"Unknown command: {verb}")
