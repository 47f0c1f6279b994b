import pytest

from tintiles.benchmark_stats import (
    HEADER_LINE,
    StatsCSVWriter,
    StatsRow,
    format_row,
    strip_home_dir,
)


def test_format_default_row():
    assert format_row(StatsRow()) == ",,-1,-1,-1,nan,nan,-1,nan,nan,nan,nan,-1,-1\r\n"


def test_format_row_field_order_matches_header():
    row = StatsRow(
        is_ok=True,
        input_file="dem.tif",
        method_name="terra",
        input_num_points=100,
        input_width=10,
        input_height=10,
        param_max_error=0.5,
        param_step=3,
        meshing_time_seconds=1.25,
        mean_error=1.0,
        standard_dev_error=2.0,
        max_error=4.0,
        num_vertices=7,
        num_faces=9,
    )
    line = format_row(row)
    assert line.endswith("\r\n")
    fields = line[:-2].split(",")
    header = HEADER_LINE[1:-2].split(",")
    assert len(fields) == len(header)
    values = dict(zip(header, fields))
    assert values["input_file"] == "dem.tif"
    assert values["method_name"] == "terra"
    assert int(values["input_num_points"]) == 100
    assert float(values["param_max_error"]) == 0.5
    assert values["param_threshold"] == "nan"
    assert int(values["param_step"]) == 3
    assert float(values["mean_error"]) == 1.0
    assert float(values["std_dev_error"]) == 2.0
    assert float(values["max_error"]) == 4.0
    assert int(values["num_faces"]) == 9


def test_float_fields_have_six_decimals():
    fields = format_row(StatsRow(param_max_error=0.5)).split(",")
    assert fields[5] == "0.500000"


def test_writer_writes_header_once(tmp_path):
    path = tmp_path / "stats.csv"
    writer = StatsCSVWriter(path)
    writer.write_row(StatsRow(method_name="regular"))
    writer.write_row(StatsRow(method_name="terra"))
    data = path.read_bytes().decode()
    assert data.startswith(HEADER_LINE)
    assert data.count(HEADER_LINE) == 1
    assert data == (
        HEADER_LINE
        + format_row(StatsRow(method_name="regular"))
        + format_row(StatsRow(method_name="terra"))
    )


def test_writer_resumes_without_new_header(tmp_path):
    path = tmp_path / "stats.csv"
    StatsCSVWriter(path).write_row(StatsRow(method_name="a"))
    StatsCSVWriter(path).write_row(StatsRow(method_name="b"))
    data = path.read_bytes().decode()
    assert data.count(HEADER_LINE) == 1
    assert data.count("\r\n") == 3
    assert data.endswith(format_row(StatsRow(method_name="b")))


def test_writer_on_directory_fails(tmp_path):
    with pytest.raises(OSError):
        StatsCSVWriter(tmp_path).write_row(StatsRow())


def test_strip_home_dir_prefix():
    assert strip_home_dir("/home/u/data/x.tif", "/home/u") == "~/data/x.tif"


def test_strip_home_dir_not_prefix():
    assert strip_home_dir("/data/home/u/x.tif", "/home/u") == "/data/home/u/x.tif"


def test_strip_home_dir_empty_home():
    assert strip_home_dir("/home/u/x.tif", "") == "/home/u/x.tif"


def test_strip_home_dir_uses_environment(monkeypatch):
    monkeypatch.setenv("HOME", "/home/u")
    assert strip_home_dir("/home/u/dem.tif") == "~/dem.tif"