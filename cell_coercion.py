import math

import pandas as pd


# longest leading decimal literal, as read by a lenient float parser:
# "12kg" -> 12, " .5" -> 0.5, "1e3x" -> 1000, "1e" -> 1
LEADING_NUMBER = r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"


def numeric_series(column: pd.Series) -> pd.Series:
    """Leading number of every cell as float64; NaN where a cell has none."""
    text = column.astype(str)
    literal = text.str.extract(LEADING_NUMBER, expand=False)
    literal = literal.replace({"Infinity": "inf", "+Infinity": "inf", "-Infinity": "-inf"})
    return pd.to_numeric(literal, errors="coerce").astype("float64")


def parse_number(text) -> float:
    """Return the cell's leading number as a float, or nan when it has none."""
    text = "" if text is None else str(text)
    return float(numeric_series(pd.Series([text], dtype=object)).iloc[0])


def compare_cells(a_text: str, a_num: float, b_text: str, b_num: float) -> int:
    """Numeric order when both cells are numbers, else case-insensitive text."""
    if not math.isnan(a_num) and not math.isnan(b_num):
        return (a_num > b_num) - (a_num < b_num)
    a = str(a_text).lower()
    b = str(b_text).lower()
    return (a > b) - (a < b)
