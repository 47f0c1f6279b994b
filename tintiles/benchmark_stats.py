"""Benchmark result rows and the CSV file that collects them."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)

HEADER_LINE = (
    "#input_file,method_name,"
    "input_num_points,input_width,input_height,"
    "param_max_error,param_threshold,param_step,"
    "meshing_time_seconds,mean_error,std_dev_error,max_error,"
    "num_vertices,num_faces\r\n"
)


@dataclass
class StatsRow:
    """Measurements from one run of one meshing method with one parameter set."""

    is_ok: bool = False
    input_file: str = ""
    method_name: str = ""
    input_num_points: int = -1
    input_width: int = -1
    input_height: int = -1
    param_max_error: float = math.nan
    param_threshold: float = math.nan
    param_step: int = -1
    meshing_time_seconds: float = math.nan
    standard_dev_error: float = math.nan
    mean_error: float = math.nan
    max_error: float = math.nan
    num_vertices: int = -1
    num_faces: int = -1


def _float_field(value: float) -> str:
    return f"{value:f}"


def format_row(row: StatsRow) -> str:
    """Render a row as one CSV line, ending in CRLF, in the order of ``HEADER_LINE``."""
    fields = [
        row.input_file,
        row.method_name,
        str(row.input_num_points),
        str(row.input_width),
        str(row.input_height),
        _float_field(row.param_max_error),
        _float_field(row.param_threshold),
        str(row.param_step),
        _float_field(row.meshing_time_seconds),
        _float_field(row.mean_error),
        _float_field(row.standard_dev_error),
        _float_field(row.max_error),
        str(row.num_vertices),
        str(row.num_faces),
    ]
    return ",".join(fields) + "\r\n"


def strip_home_dir(path: str, home_dir: str | None = None) -> str:
    """Replace a leading home directory in ``path`` with ``~``.

    Without ``home_dir`` the ``HOME`` environment variable is used; an empty
    home directory leaves the path unchanged.
    """
    if home_dir is None:
        home_dir = os.environ.get("HOME", "")
    if not home_dir or not path.startswith(home_dir):
        return path
    return "~" + path[len(home_dir):]


class StatsCSVWriter:
    """Appends benchmark rows to a CSV file, writing the header once."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        with self.path.open("ab"):
            pass
        self._header_written = self.path.stat().st_size > 0

    def _append(self, text: str) -> None:
        with self.path.open("ab") as stream:
            stream.write(text.encode("utf-8"))
            stream.flush()

    def write_row(self, row: StatsRow) -> None:
        """Append a row, preceded by the header line if the file was empty."""
        if not self._header_written:
            self._append(HEADER_LINE)
            self._header_written = True
        line = format_row(row)
        log.info("stats: %s", line.rstrip())
        self._append(line)