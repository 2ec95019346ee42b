import csv
import os
from datetime import datetime
from pathlib import Path
from typing import IO, List, Optional
import pandas as pd
from ..domain.models import Row
from ..exceptions import RecorderError

FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H%M%S"
ROW_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

def format_latency(value: float) -> str:
    """Whole milliseconds without a trailing ".0"; anything else as repr()."""
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)

def build_header(target_count: int) -> List[str]:
    header = ["UtcTimestamp"]
    for i in range(target_count):
        header += [f"Server{i}Problem", f"Server{i}Ping", f"Server{i}Error"]
    return header

def format_row(row: Row) -> List[object]:
    """
    Cell values for one row. Absent values are None and end up as empty
    fields in the file.
    """
    cells: List[object] = [row.timestamp.strftime(ROW_TIMESTAMP_FORMAT)]
    for sample in row.samples:
        cells.append(0 if sample.success else 1)
        cells.append(format_latency(sample.elapsed_ms) if sample.success else None)
        cells.append(None if sample.success else sample.error)
    return cells

class CsvRecorder:
    """
    Append-only CSV sink, one file per run.

    Every row is flushed and fsynced before write_row() returns, so a
    killed process loses at most the row it was in the middle of.
    """
    def __init__(self, output_dir: Path, target_count: int, started_at: Optional[datetime] = None):
        if target_count < 1:
            raise RecorderError("At least one target is required")
        self.output_dir = Path(output_dir)
        self.columns = build_header(target_count)
        self.started_at = started_at or datetime.now()
        self.path = self.output_dir / f"{self.started_at.strftime(FILE_TIMESTAMP_FORMAT)}.csv"
        self.rows_written = 0
        self._fh: Optional[IO[str]] = None

    def open(self) -> "CsvRecorder":
        if self._fh:
            return self
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            # "x": never append to (or clobber) another run's file
            self._fh = open(self.path, "x", newline="", encoding="utf-8")
        except OSError as e:
            raise RecorderError(f"Cannot create output file {self.path}: {e}")
        self._write(pd.DataFrame(columns=self.columns), header=True)
        return self

    def write_row(self, row: Row) -> None:
        if not self._fh:
            raise RecorderError("Recorder is not open")
        cells = format_row(row)
        if len(cells) != len(self.columns):
            raise RecorderError(f"Row has {len(cells)} fields, header has {len(self.columns)}")
        df = pd.DataFrame([cells], columns=self.columns, dtype=object)
        self._write(df, header=False)
        self.rows_written += 1

    def _write(self, df: pd.DataFrame, header: bool) -> None:
        df.to_csv(
            self._fh,
            header=header,
            index=False,
            na_rep="",
            quoting=csv.QUOTE_MINIMAL,
            lineterminator="\n",
        )
        self._fh.flush()
        os.fsync(self._fh.fileno())

    def close(self) -> None:
        if self._fh:
            try:
                self._fh.flush()
            finally:
                self._fh.close()
                self._fh = None

    @property
    def closed(self) -> bool:
        return self._fh is None

    def __enter__(self) -> "CsvRecorder":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
