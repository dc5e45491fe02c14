# app/database.py
"""
Simple file-backed DB layer using CSV (preferred) or Excel (xlsx) as storage.
Provides basic CRUD primitives per table name. Uses file locking to avoid
simultaneous writes corrupting files.

Usage:
    from app.database import db
    db.get_record("carts", "user_id", "u1")
    db.create_record("carts", {"user_id": "u1", "items": "[]"})
"""

from pathlib import Path
from typing import Any, Dict, Optional
import pandas as pd
import uuid
from filelock import FileLock
from app.config import settings


class FileBackedDB:
    """
    Manages CSV / Excel files inside a data directory.
    Table name corresponds to a file name in settings (or you may pass full filename).
    When no directory is given, settings.DATA_DIR is resolved on every access.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        self._data_dir = Path(data_dir) if data_dir is not None else None

    @property
    def data_dir(self) -> Path:
        return self._data_dir if self._data_dir is not None else Path(settings.DATA_DIR)

    @data_dir.setter
    def data_dir(self, value: Path) -> None:
        self._data_dir = Path(value)

    def _file_path(self, table: str) -> Path:
        """
        Resolve table -> file path. If table looks like a filename (has .csv/.xlsx),
        use it directly (relative to data_dir). Otherwise try config mapping,
        else fallback to table + .csv
        """
        if table.endswith(".csv") or table.endswith(".xlsx"):
            return self.data_dir / Path(table)

        mapping = {
            "carts": settings.CARTS_FILE,
        }
        filename = mapping.get(table, f"{table}.csv")
        return self.data_dir / Path(filename)

    def _lock_for(self, path: Path) -> FileLock:
        return FileLock(str(path) + ".lock")

    def _read_df(self, table: str) -> pd.DataFrame:
        path = self._file_path(table)
        if not path.exists():
            return pd.DataFrame()
        if path.suffix.lower() == ".csv":
            return pd.read_csv(path, dtype=str, keep_default_na=False)
        if path.suffix.lower() in (".xls", ".xlsx"):
            return pd.read_excel(path, dtype=str).fillna("")
        # unknown extension: try csv then excel
        try:
            return pd.read_csv(path, dtype=str, keep_default_na=False)
        except (ValueError, UnicodeDecodeError):
            return pd.read_excel(path, dtype=str).fillna("")

    def _write_df_nolock(self, table: str, df: pd.DataFrame) -> None:
        """
        Write DataFrame for `table` WITHOUT acquiring file lock.
        Use this only when the caller already holds the lock.
        """
        path = self._file_path(table)
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix.lower() in (".xls", ".xlsx"):
            df.to_excel(path, index=False)
        else:
            df.to_csv(path, index=False)

    def _write_df(self, table: str, df: pd.DataFrame) -> None:
        path = self._file_path(table)
        path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock_for(path):
            self._write_df_nolock(table, df)

    @staticmethod
    def _row_to_dict(df: pd.DataFrame, mask) -> Dict[str, Any]:
        row = df[mask].iloc[0].to_dict()
        return {k: (None if pd.isna(v) else v) for k, v in row.items()}

    # --- high-level CRUD primitives ---

    def get_record(self, table: str, key: str, value: Any) -> Optional[Dict[str, Any]]:
        df = self._read_df(table)
        if df.empty or key not in df.columns:
            return None
        # treat everything as string for comparison simplicity
        mask = df[key].astype(str) == str(value)
        if not mask.any():
            return None
        return self._row_to_dict(df, mask)

    def create_record(self, table: str, data: Dict[str, Any], id_field: str = "id") -> Dict[str, Any]:
        """
        Create a new record. If id_field not present in `data`, one will be generated (uuid4 hex).
        Returns the saved record (with id).
        """
        if id_field not in data or not data.get(id_field):
            data[id_field] = uuid.uuid4().hex
        new_row = {k: ("" if v is None else v) for k, v in data.items()}

        path = self._file_path(table)
        path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock_for(path):
            df = self._read_df(table)
            if df.empty:
                df = pd.DataFrame([new_row])
            else:
                df = pd.concat([df, pd.DataFrame([new_row])], ignore_index=True, sort=False)
            self._write_df_nolock(table, df)
        return data

    def update_record(self, table: str, key: str, value: Any, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Update rows where df[key] == value with fields in updates. Returns the updated first row dict or None.
        """
        path = self._file_path(table)
        with self._lock_for(path):
            df = self._read_df(table)
            if df.empty or key not in df.columns:
                return None
            mask = df[key].astype(str) == str(value)
            if not mask.any():
                return None
            for k, v in updates.items():
                if k not in df.columns:
                    df[k] = ""
                df.loc[mask, k] = "" if v is None else v
            self._write_df_nolock(table, df)
            return self._row_to_dict(df, mask)


# module-level singleton for convenience
db = FileBackedDB()
