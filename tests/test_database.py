import pytest

from tuvrxns.database import ExternalDatabaseEntry, load_database


def test_load_database_without_scaling(database_dir):
    database = load_database(database_dir / "MCMv331.db")
    assert database.name == "MCMv331"
    assert len(database) == 5
    assert database.entries[0] == ExternalDatabaseEntry(1, "O3 -> O2 + O(1D)")
    assert database.entries[-1].number == 99
    assert not any(entry.is_scaled() for entry in database)


def test_load_database_with_scaling(database_dir):
    database = load_database(
        database_dir / "MCMv32.db", columns=["number", "scaling_factor", "label"]
    )
    assert [entry.scaling_factor for entry in database] == [1.0, 0.5, 1.0]
    assert [entry.is_scaled() for entry in database] == [False, True, False]
    assert database.unique_labels() == ["O3 -> O2 + O(1D)", "NO2 -> NO + O(3P)"]
    assert [entry.number for entry in database.entries_for("O3 -> O2 + O(1D)")] == [1, 3]


def test_custom_separator_and_header(tmp_path):
    path = tmp_path / "custom.db"
    path.write_text("# comment\n# header\n7;A\n8;B\n\n")
    database = load_database(path, name="custom", separator=";", header_skip=2)
    assert [(entry.number, entry.label) for entry in database] == [(7, "A"), (8, "B")]


def test_columns_must_include_label(database_dir):
    with pytest.raises(ValueError):
        load_database(database_dir / "MCMv331.db", columns=["number", "name"])
