import pytest

from csv_dedup.dedup import compute_result, deduplicate
from csv_dedup.errors import KeyNotFoundInTable
from csv_dedup.tables import parse_table


def test_two_file_scenario_keeps_first_occurrence(people_tables):
    result = deduplicate(people_tables, "id", case_sensitive=True)

    assert result.rows == ("id,name", "1,Alice", "2,Bob", "id,name", "3,Carl")
    assert result.duplicate_count == 1
    assert result.unique_count == 3
    assert result.header_positions == (0, 3)


def test_uniqueness_is_shared_across_tables_not_per_table():
    tables = [
        parse_table("a.csv", "k\nx\ny"),
        parse_table("b.csv", "k\ny\nx\nz"),
    ]
    result = deduplicate(tables, "k")

    assert result.rows == ("k", "x", "y", "k", "z")
    assert result.duplicate_count == 2


def test_duplicates_within_one_table():
    tables = [parse_table("a.csv", "id,v\n1,a\n1,b\n1,c")]
    result = deduplicate(tables, "id")

    assert result.rows == ("id,v", "1,a")
    assert result.duplicate_count == 2


def test_case_policy():
    tables = [parse_table("a.csv", "code\nABC\nabc\nAbc")]

    sensitive = deduplicate(tables, "code", case_sensitive=True)
    insensitive = deduplicate(tables, "code", case_sensitive=False)

    assert sensitive.duplicate_count == 0
    assert insensitive.duplicate_count == 2
    # Lower-casing affects comparison only.
    assert insensitive.rows == ("code", "ABC")


def test_key_column_position_differs_per_table():
    tables = [
        parse_table("a.csv", "id,email\n1,a@x.org\n2,b@x.org"),
        parse_table("b.csv", "email,id\nb@x.org,7\nc@x.org,8"),
    ]
    result = deduplicate(tables, "email")

    assert result.rows == ("id,email", "1,a@x.org", "2,b@x.org", "email,id", "c@x.org,8")
    assert result.duplicate_count == 1


def test_short_rows_get_a_key_distinct_from_empty_field():
    tables = [parse_table("a.csv", "id,name\n1\n2,\n3")]
    result = deduplicate(tables, "name")

    # "1" and "3" lack the field entirely; "2," has an empty one.
    assert result.rows == ("id,name", "1", "2,")
    assert result.duplicate_count == 1


def test_count_invariant_holds(people_tables):
    extra = parse_table("c.csv", "name,id\nDan,4\nAlice,1\nEve,5")
    tables = [*people_tables, extra]
    result = deduplicate(tables, "id")

    total = sum(t.row_count for t in tables)
    assert result.duplicate_count + result.unique_count == total


def test_deduplicate_is_idempotent(people_tables):
    first = deduplicate(people_tables, "name", case_sensitive=False)
    second = deduplicate(people_tables, "name", case_sensitive=False)
    assert first == second


def test_missing_key_raises_naming_the_table():
    tables = [
        parse_table("a.csv", "id,name\n1,A"),
        parse_table("b.csv", "name\nA"),
    ]
    with pytest.raises(KeyNotFoundInTable) as excinfo:
        deduplicate(tables, "id")

    assert excinfo.value.table_name == "b.csv"
    assert excinfo.value.key == "id"
    assert "b.csv" in str(excinfo.value)


def test_no_tables_gives_empty_result():
    result = deduplicate([], "id")
    assert result.rows == ()
    assert result.duplicate_count == 0
    assert result.unique_count == 0


def test_summary_and_csv_text(people_tables):
    result = deduplicate(people_tables, "id", case_sensitive=False)

    assert result.summary() == (
        "Processed 2 files, finding 1 duplicates and 3 unique keys (Case Insensitive)."
    )
    assert result.to_csv_text() == "id,name\n1,Alice\n2,Bob\nid,name\n3,Carl"


def test_compute_result_without_key_is_none(people_tables):
    assert compute_result(people_tables, None) is None
    assert compute_result(people_tables, "id") == deduplicate(people_tables, "id")
