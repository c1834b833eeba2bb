import json
import os
import sys

import pandas as pd
import pytest

from export_handler import ExportError, ExportHandler


@pytest.fixture
def frame():
    return pd.DataFrame([["Ann", "3"], ["Zoë", ""]], columns=["name", "n"])


@pytest.mark.parametrize("fmt, ext", [("csv", ".csv"), ("JSON", ".json"), ("excel", ".xlsx")])
def test_extension_follows_format(fmt, ext):
    assert ExportHandler(fmt).ext == ext


@pytest.mark.parametrize("fmt", ["xml", "", None, "xlsx"])
def test_unknown_format_rejected(fmt):
    with pytest.raises(ExportError):
        ExportHandler(fmt)


def test_default_path_next_to_source(tmp_path):
    source = tmp_path / "sales.csv"
    path = ExportHandler("json").default_path(str(source))
    assert path == os.path.join(str(tmp_path), "sales_view.json")


def test_default_path_directory_wins(tmp_path):
    path = ExportHandler("csv").default_path("/data/sales.csv", str(tmp_path))
    assert path == os.path.join(str(tmp_path), "sales_view.csv")


def test_default_path_without_source(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    path = ExportHandler("excel").default_path(None)
    assert path == os.path.join(str(tmp_path), "table_view.xlsx")


def test_write_csv(frame, tmp_path):
    target = tmp_path / "out.csv"
    assert ExportHandler("csv").write(frame, str(target)) == str(target)
    assert target.read_text(encoding="utf-8").splitlines() == ["name,n", "Ann,3", "Zoë,"]


def test_write_json_keeps_unicode(frame, tmp_path):
    target = tmp_path / "out.json"
    ExportHandler("json").write(frame, str(target))
    text = target.read_text(encoding="utf-8")
    assert "Zoë" in text
    assert json.loads(text) == [{"name": "Ann", "n": "3"}, {"name": "Zoë", "n": ""}]


def test_write_excel(frame, tmp_path):
    pytest.importorskip("openpyxl")
    target = tmp_path / "out.xlsx"
    ExportHandler("excel").write(frame, str(target))
    back = pd.read_excel(target, sheet_name=ExportHandler.DEFAULT_SHEET_NAME, dtype=str)
    assert back["name"].tolist() == ["Ann", "Zoë"]


def test_write_to_missing_directory_raises_os_error(frame, tmp_path):
    with pytest.raises(OSError):
        ExportHandler("csv").write(frame, str(tmp_path / "nope" / "out.csv"))


def test_excel_without_openpyxl_raises_export_error(frame, tmp_path, monkeypatch):
    monkeypatch.setitem(sys.modules, "openpyxl", None)
    with pytest.raises(ExportError) as excinfo:
        ExportHandler("excel").write(frame, str(tmp_path / "out.xlsx"))
    assert isinstance(excinfo.value.__cause__, ImportError)
    assert not (tmp_path / "out.xlsx").exists()
