import pandas as pd
import polars as pl

from csv_dedup.dedup import deduplicate
from csv_dedup.reports import (
    files_frame,
    sanitize_for_excel,
    table_to_frame,
    write_csv_output,
    write_excel_report,
)
from csv_dedup.tables import parse_table


def test_table_to_frame_pads_and_folds_ragged_rows():
    table = parse_table("r.csv", "id,name,\n1,Alice,x\n2\n3,Carl,y,z")

    frame = table_to_frame(table)

    assert frame.columns == ["id", "name", "col_3"]
    assert frame.to_dict(as_series=False) == {
        "id": ["1", "2", "3"],
        "name": ["Alice", "", "Carl"],
        "col_3": ["x", "", "y,z"],
    }


def test_table_to_frame_renames_repeated_headers_and_limits_rows():
    table = parse_table("d.csv", "id,id\n1,2\n3,4\n5,6")

    frame = table_to_frame(table, limit=2)

    assert frame.columns == ["id", "id_2"]
    assert frame.height == 2


def test_table_to_frame_without_rows():
    frame = table_to_frame(parse_table("h.csv", "a,b"))
    assert frame.shape == (0, 2)
    assert frame.schema["a"] == pl.Utf8


def test_files_frame(people_tables):
    frame = files_frame(people_tables)
    assert frame.to_dict(as_series=False) == {
        "file": ["a.csv", "b.csv"],
        "columns": [2, 2],
        "rows": [2, 2],
    }


def test_sanitize_for_excel():
    assert sanitize_for_excel("=SUM(A1)") == "'=SUM(A1)"
    assert sanitize_for_excel("-5") == "'-5"
    assert sanitize_for_excel("plain") == "plain"
    assert sanitize_for_excel(None) == ""


def test_write_csv_output(tmp_path, people_tables):
    result = deduplicate(people_tables, "id")
    out = write_csv_output(result, tmp_path / "nested" / "merged.csv")

    assert out.read_text(encoding="utf-8") == "id,name\n1,Alice\n2,Bob\nid,name\n3,Carl"


def test_write_excel_report(tmp_path, people_tables):
    result = deduplicate(people_tables, "id")
    path = write_excel_report(result, tmp_path / "merged.xlsx")

    xls = pd.ExcelFile(path)
    assert xls.sheet_names == ["Deduplicated", "Summary"]

    rows = pd.read_excel(path, sheet_name="Deduplicated", header=None, dtype=str)
    assert rows.values.tolist() == [
        ["id", "name"],
        ["1", "Alice"],
        ["2", "Bob"],
        ["id", "name"],
        ["3", "Carl"],
    ]

    summary = pd.read_excel(path, sheet_name="Summary")
    metrics = dict(zip(summary["Metric"], summary["Value"]))
    assert int(metrics["Duplicates dropped"]) == 1
    assert int(metrics["Unique keys"]) == 3
    assert metrics["Key column"] == "id"


def test_write_excel_report_truncates(tmp_path, people_tables):
    result = deduplicate(people_tables, "id")
    path = write_excel_report(result, tmp_path / "short.xlsx", max_rows=2)

    rows = pd.read_excel(path, sheet_name="Deduplicated", header=None, dtype=str)
    assert len(rows) == 2
