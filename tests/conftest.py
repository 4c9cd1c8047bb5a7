import pytest

from csv_dedup.tables import parse_table


@pytest.fixture
def people_tables():
    """Two files sharing id/name: A has 1,2 and B has 2,3."""

    table_a = parse_table("a.csv", "id,name\n1,Alice\n2,Bob")
    table_b = parse_table("b.csv", "id,name\n2,Bobby\n3,Carl")
    return [table_a, table_b]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run from an empty directory with no CSV_DEDUP_* variables set."""

    for var in (
        "CSV_DEDUP_CONFIG",
        "CSV_DEDUP_CASE_SENSITIVE",
        "CSV_DEDUP_ENCODINGS",
        "CSV_DEDUP_MAX_WORKERS",
        "CSV_DEDUP_LOG_LEVEL",
        "CSV_DEDUP_OUTPUT_DIR",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
