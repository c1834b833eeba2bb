"""Filter, sort and column-visibility state layered over a parsed table."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from cell_coercion import compare_cells, numeric_series, parse_number
from table_parser import Table


logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when a view request carries bad parameters. State is untouched."""


class FilterOperator(str, Enum):
    CONTAINS = "contains"
    EQUALS = "equals"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"

    @classmethod
    def from_value(cls, value) -> "FilterOperator":
        """Create a :class:`FilterOperator` from its wire name, case-insensitively."""

        if isinstance(value, cls):
            return value
        lowered = str(value).lower()
        for item in cls:
            if item.value.lower() == lowered:
                return item
        valid_values = ", ".join(item.value for item in cls)
        raise ValidationError(f"Invalid filter operator '{value}'. Expected one of: {valid_values}.")

    @property
    def is_numeric(self) -> bool:
        return self in (FilterOperator.GREATER_THAN, FilterOperator.LESS_THAN)


@dataclass(frozen=True)
class Filter:
    """A single column predicate. Active filters combine with AND."""

    column_index: int
    operator: FilterOperator
    value: str

    def mask(self, column: pd.Series) -> np.ndarray:
        """Boolean mask of the rows in ``column`` that satisfy this filter."""

        if self.operator.is_numeric:
            target = parse_number(self.value)
            numbers = numeric_series(column)
            if self.operator is FilterOperator.GREATER_THAN:
                result = numbers > target
            else:
                result = numbers < target
            return result.to_numpy(dtype=bool)

        cells = column.astype(str).str.lower()
        needle = self.value.lower()
        if self.operator is FilterOperator.CONTAINS:
            result = cells.str.contains(needle, regex=False)
        elif self.operator is FilterOperator.EQUALS:
            result = cells == needle
        elif self.operator is FilterOperator.STARTS_WITH:
            result = cells.str.startswith(needle)
        else:
            result = cells.str.endswith(needle)
        return result.to_numpy(dtype=bool)

    def describe(self, headers: List[str]) -> str:
        name = headers[self.column_index] if self.column_index < len(headers) else str(self.column_index)
        return f"{name} {self.operator.value} {self.value}"


@dataclass(frozen=True)
class SortSpec:
    column_index: Optional[int] = None
    ascending: bool = True

    @property
    def active(self) -> bool:
        return self.column_index is not None


class ViewEngine:
    """Holds one table and derives the rows the user currently sees.

    The pipeline is filter, then stable sort, then (on the consumer side)
    projection through the visibility mask. Rows returned by
    :meth:`get_display_rows` are the table's own records, full width.
    """

    def __init__(self, table: Optional[Table] = None):
        self.table: Table = Table.empty()
        self.active_filters: List[Filter] = []
        self.sort_spec = SortSpec()
        self.visibility: Dict[int, bool] = {}
        self._order: List[int] = []
        self.initialize(table if table is not None else Table.empty())

    # ---------- lifecycle ----------
    def initialize(self, table: Table) -> None:
        self.table = table
        self.active_filters = []
        self.sort_spec = SortSpec()
        self.visibility = {idx: True for idx in range(table.column_count)}
        self._order = list(range(table.row_count))
        logger.debug("View initialized over %r", table)

    # ---------- validation ----------
    def _check_column(self, column_index) -> int:
        if isinstance(column_index, bool) or not isinstance(column_index, (int, np.integer)):
            raise ValidationError(f"Column index must be an integer, got {column_index!r}")
        column_index = int(column_index)
        if not 0 <= column_index < self.table.column_count:
            raise ValidationError(
                f"Column index {column_index} out of range (0-{self.table.column_count - 1})"
                if self.table.column_count
                else "Table has no columns"
            )
        return column_index

    # ---------- filters ----------
    def apply_filter(self, flt: Filter) -> None:
        column_index = self._check_column(flt.column_index)
        operator = FilterOperator.from_value(flt.operator)
        value = "" if flt.value is None else str(flt.value).strip()
        if not value:
            raise ValidationError("Filter value must not be empty")

        self.active_filters.append(Filter(column_index, operator, value))
        self._recompute()
        logger.info("Filter applied: %s (%d rows)", self.active_filters[-1].describe(self.table.headers), self.row_count)

    def clear_filters(self) -> None:
        self.active_filters = []
        self._recompute()

    # ---------- sorting ----------
    def set_sort(self, column_index: Optional[int]) -> None:
        """Sort by ``column_index``; choosing the sorted column again flips direction."""
        if column_index is None:
            self.sort_spec = SortSpec()
        else:
            column_index = self._check_column(column_index)
            if self.sort_spec.column_index == column_index:
                self.sort_spec = SortSpec(column_index, not self.sort_spec.ascending)
            else:
                self.sort_spec = SortSpec(column_index, True)
        self._recompute()

    def sort_by(self, column_index: int, ascending: bool = True) -> None:
        column_index = self._check_column(column_index)
        self.sort_spec = SortSpec(column_index, bool(ascending))
        self._recompute()

    # ---------- visibility ----------
    def set_column_visibility(self, column_index: int, visible: bool) -> None:
        column_index = self._check_column(column_index)
        self.visibility[column_index] = bool(visible)

    def set_all_columns_visible(self, visible: bool) -> None:
        for idx in range(self.table.column_count):
            self.visibility[idx] = bool(visible)

    def is_visible(self, column_index: int) -> bool:
        return self.visibility.get(column_index, True)

    def visible_columns(self) -> List[int]:
        return [idx for idx in range(self.table.column_count) if self.is_visible(idx)]

    # ---------- derived view ----------
    @property
    def row_count(self) -> int:
        return len(self._order)

    def get_display_rows(self) -> List[List[str]]:
        return [self.table.rows[pos] for pos in self._order]

    def display_frame(self) -> pd.DataFrame:
        """Display rows projected onto the visible columns, labelled by header."""
        columns = self.visible_columns()
        frame = self.table.frame.iloc[self._order, columns]
        frame = frame.reset_index(drop=True)
        frame.columns = _unique_labels([self.table.headers[idx] for idx in columns])
        return frame

    def _recompute(self) -> None:
        frame = self.table.frame
        mask = np.ones(len(frame), dtype=bool)
        for flt in self.active_filters:
            mask &= flt.mask(frame[flt.column_index])
        positions = [int(pos) for pos in np.flatnonzero(mask)]

        if self.sort_spec.active:
            positions = self._sorted_positions(positions)
        self._order = positions

    def _sorted_positions(self, positions: List[int]) -> List[int]:
        column = self.table.frame[self.sort_spec.column_index]
        texts = column.tolist()
        numbers = numeric_series(column).tolist()
        sign = 1 if self.sort_spec.ascending else -1

        def _cmp(a, b):
            return sign * compare_cells(texts[a], numbers[a], texts[b], numbers[b])

        # sorted() is stable; negating the comparison keeps ties in input order
        return sorted(positions, key=cmp_to_key(_cmp))


def _unique_labels(labels: List[str]) -> List[str]:
    used = set()
    result = []
    for idx, label in enumerate(labels):
        base = label if label else f"column_{idx + 1}"
        candidate = base
        suffix = 1
        while candidate in used:
            suffix += 1
            candidate = f"{base}_{suffix}"
        used.add(candidate)
        result.append(candidate)
    return result
