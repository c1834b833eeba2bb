import logging
import os

import pandas as pd


logger = logging.getLogger(__name__)


class ExportError(ValueError):
    pass


class ExportHandler:
    EXTENSIONS = {"csv": ".csv", "json": ".json", "excel": ".xlsx"}
    DEFAULT_SHEET_NAME = "Sheet1"

    def __init__(self, fmt: str):
        self.fmt = str(fmt or "").lower()
        if self.fmt not in self.EXTENSIONS:
            raise ExportError(
                f"Unsupported export format '{fmt}' (use {', '.join(self.EXTENSIONS)})"
            )

    @property
    def ext(self) -> str:
        return self.EXTENSIONS[self.fmt]

    def default_path(self, source: str | None, directory: str | None = None) -> str:
        stem = "table"
        base_dir = os.getcwd()
        if source:
            base_dir = os.path.dirname(os.path.abspath(source))
            stem = os.path.splitext(os.path.basename(source))[0] or stem
        if directory:
            base_dir = os.path.expanduser(directory)
        return os.path.join(base_dir, f"{stem}_view{self.ext}")

    def write(self, frame: pd.DataFrame, path: str) -> str:
        path = os.path.expanduser(path)
        if self.fmt == "csv":
            frame.to_csv(path, index=False)
        elif self.fmt == "json":
            frame.to_json(path, orient="records", indent=2, force_ascii=False)
        elif self.fmt == "excel":
            self._ensure_excel_engine()
            with pd.ExcelWriter(path) as writer:
                frame.to_excel(writer, index=False, sheet_name=self.DEFAULT_SHEET_NAME)
        logger.info("Exported %d rows x %d columns to %s", len(frame), len(frame.columns), path)
        return path

    def _ensure_excel_engine(self):
        try:
            import openpyxl  # noqa: F401
        except ImportError as exc:
            raise ExportError("Excel export requires openpyxl. Install via: pip install openpyxl") from exc
