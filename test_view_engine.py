import pytest

from table_parser import Table, parse
from view_engine import Filter, FilterOperator, SortSpec, ValidationError, ViewEngine


PEOPLE = """name,city,age
Alice,New York,30
bob,Boston,25
Carol,new york,41
dave,Chicago,25
Eve,Boston,abc
"""


@pytest.fixture
def engine():
    return ViewEngine(parse(PEOPLE))


def _names(engine):
    return [row[0] for row in engine.get_display_rows()]


def test_initial_state_shows_every_row(engine):
    assert engine.get_display_rows() == engine.table.rows
    assert engine.active_filters == []
    assert engine.sort_spec == SortSpec(None, True)
    assert engine.visible_columns() == [0, 1, 2]


@pytest.mark.parametrize(
    "column, operator, value, expected",
    [
        (1, FilterOperator.CONTAINS, "YORK", ["Alice", "Carol"]),
        (1, FilterOperator.EQUALS, "boston", ["bob", "Eve"]),
        (0, FilterOperator.STARTS_WITH, "A", ["Alice"]),
        (0, FilterOperator.ENDS_WITH, "E", ["Alice", "dave", "Eve"]),
        (2, FilterOperator.GREATER_THAN, "26", ["Alice", "Carol"]),
        (2, FilterOperator.LESS_THAN, "30", ["bob", "dave"]),
        (2, FilterOperator.LESS_THAN, "abc", []),
    ],
)
def test_filter_operators(engine, column, operator, value, expected):
    engine.apply_filter(Filter(column, operator, value))
    assert _names(engine) == expected


def test_operator_given_by_wire_name(engine):
    engine.apply_filter(Filter(1, "equals", "chicago"))
    assert _names(engine) == ["dave"]
    assert engine.active_filters[0].operator is FilterOperator.EQUALS


def test_filters_combine_with_and_in_any_order():
    first = ViewEngine(parse(PEOPLE))
    first.apply_filter(Filter(1, FilterOperator.EQUALS, "boston"))
    first.apply_filter(Filter(2, FilterOperator.EQUALS, "25"))

    second = ViewEngine(parse(PEOPLE))
    second.apply_filter(Filter(2, FilterOperator.EQUALS, "25"))
    second.apply_filter(Filter(1, FilterOperator.EQUALS, "boston"))

    assert _names(first) == ["bob"]
    assert first.get_display_rows() == second.get_display_rows()


def test_display_rows_are_members_of_the_table(engine):
    engine.apply_filter(Filter(1, FilterOperator.CONTAINS, "o"))
    engine.set_sort(2)
    rows = engine.get_display_rows()
    assert len(rows) <= len(engine.table.rows)
    for row in rows:
        assert any(row is original for original in engine.table.rows)


def test_filter_value_is_trimmed(engine):
    engine.apply_filter(Filter(0, FilterOperator.EQUALS, "  bob  "))
    assert engine.active_filters[0].value == "bob"
    assert _names(engine) == ["bob"]


@pytest.mark.parametrize(
    "flt",
    [
        Filter(3, FilterOperator.EQUALS, "x"),
        Filter(-1, FilterOperator.EQUALS, "x"),
        Filter("1", FilterOperator.EQUALS, "x"),
        Filter(True, FilterOperator.EQUALS, "x"),
        Filter(0, FilterOperator.EQUALS, "   "),
        Filter(0, FilterOperator.EQUALS, ""),
        Filter(0, "between", "x"),
    ],
)
def test_invalid_filter_leaves_state_unchanged(engine, flt):
    engine.apply_filter(Filter(1, FilterOperator.EQUALS, "boston"))
    before_filters = list(engine.active_filters)
    before_rows = engine.get_display_rows()

    with pytest.raises(ValidationError):
        engine.apply_filter(flt)

    assert engine.active_filters == before_filters
    assert engine.get_display_rows() == before_rows


def test_no_matching_rows_is_not_an_error(engine):
    engine.apply_filter(Filter(0, FilterOperator.EQUALS, "zed"))
    assert engine.get_display_rows() == []
    assert engine.row_count == 0


def test_clear_filters_restores_sorted_full_set(engine):
    engine.set_sort(0)
    engine.apply_filter(Filter(1, FilterOperator.EQUALS, "boston"))
    engine.apply_filter(Filter(0, FilterOperator.EQUALS, "bob"))
    engine.clear_filters()

    assert engine.active_filters == []
    assert _names(engine) == ["Alice", "bob", "Carol", "dave", "Eve"]


def test_set_sort_same_column_toggles_direction(engine):
    engine.set_sort(2)
    assert engine.sort_spec == SortSpec(2, True)
    engine.set_sort(2)
    assert engine.sort_spec == SortSpec(2, False)
    engine.set_sort(0)
    assert engine.sort_spec == SortSpec(0, True)


def test_sort_is_numeric_when_both_cells_are_numbers():
    engine = ViewEngine(parse("v\n10\n9\nabc\n"))
    engine.set_sort(0)
    assert [row[0] for row in engine.get_display_rows()] == ["9", "10", "abc"]


def test_sort_is_stable_for_equal_keys(engine):
    engine.set_sort(2)
    assert _names(engine) == ["bob", "dave", "Alice", "Carol", "Eve"]
    engine.set_sort(2)
    assert _names(engine) == ["Eve", "Carol", "Alice", "bob", "dave"]


def test_text_sort_ignores_case(engine):
    engine.set_sort(1)
    assert _names(engine) == ["bob", "Eve", "dave", "Alice", "Carol"]


def test_sort_none_restores_source_order(engine):
    engine.set_sort(0)
    engine.set_sort(0)
    engine.set_sort(None)
    assert engine.sort_spec == SortSpec()
    assert engine.get_display_rows() == engine.table.rows


def test_sort_by_does_not_toggle(engine):
    engine.sort_by(0, ascending=False)
    engine.sort_by(0, ascending=False)
    assert engine.sort_spec == SortSpec(0, False)
    assert _names(engine) == ["Eve", "dave", "Carol", "bob", "Alice"]


def test_invalid_sort_column_leaves_sort_unchanged(engine):
    engine.set_sort(1)
    with pytest.raises(ValidationError):
        engine.set_sort(7)
    assert engine.sort_spec == SortSpec(1, True)


def test_visibility_does_not_change_rows(engine):
    before = engine.get_display_rows()
    engine.set_column_visibility(1, False)
    assert engine.visible_columns() == [0, 2]
    assert not engine.is_visible(1)
    assert engine.get_display_rows() == before

    engine.set_all_columns_visible(False)
    assert engine.visible_columns() == []
    engine.set_all_columns_visible(True)
    assert engine.visible_columns() == [0, 1, 2]


def test_hidden_columns_still_filter_and_sort(engine):
    engine.set_column_visibility(2, False)
    engine.apply_filter(Filter(2, FilterOperator.EQUALS, "25"))
    assert _names(engine) == ["bob", "dave"]


def test_visibility_out_of_range_is_rejected(engine):
    with pytest.raises(ValidationError):
        engine.set_column_visibility(5, False)
    assert engine.visible_columns() == [0, 1, 2]


def test_display_frame_projects_visible_columns(engine):
    engine.apply_filter(Filter(1, FilterOperator.EQUALS, "boston"))
    engine.set_column_visibility(1, False)
    frame = engine.display_frame()
    assert list(frame.columns) == ["name", "age"]
    assert frame.values.tolist() == [["bob", "25"], ["Eve", "abc"]]


def test_display_frame_labels_are_unique():
    engine = ViewEngine(parse("a,a,\n1,2,3\n"))
    assert list(engine.display_frame().columns) == ["a", "a_2", "column_3"]


def test_irregular_rows_read_missing_cells_as_empty():
    engine = ViewEngine(parse("a,b\n2,x\n1\n"))
    engine.set_sort(1)
    assert engine.get_display_rows() == [["1"], ["2", "x"]]
    engine.apply_filter(Filter(1, FilterOperator.CONTAINS, "x"))
    assert engine.get_display_rows() == [["2", "x"]]


def test_empty_table_rejects_filters():
    engine = ViewEngine()
    assert engine.get_display_rows() == []
    with pytest.raises(ValidationError):
        engine.apply_filter(Filter(0, FilterOperator.EQUALS, "x"))


def test_initialize_replaces_previous_state(engine):
    engine.apply_filter(Filter(0, FilterOperator.EQUALS, "bob"))
    engine.set_sort(0)
    engine.set_column_visibility(0, False)

    table = Table(["x"], [["1"], ["2"]])
    engine.initialize(table)

    assert engine.table is table
    assert engine.active_filters == []
    assert engine.sort_spec == SortSpec()
    assert engine.visible_columns() == [0]
    assert engine.get_display_rows() == [["1"], ["2"]]


def test_numeric_operators_read_leading_numbers():
    engine = ViewEngine(parse("weight\n12kg\n5kg\nn/a\n"))
    engine.apply_filter(Filter(0, FilterOperator.GREATER_THAN, "10"))
    assert engine.get_display_rows() == [["12kg"]]

    engine.clear_filters()
    engine.set_sort(0)
    assert [row[0] for row in engine.get_display_rows()] == ["5kg", "12kg", "n/a"]
