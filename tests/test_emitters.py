import numpy as np
import pytest
from conftest import make_deck

from tuvrxns.database import ExternalDatabaseEntry, ReactionDatabase
from tuvrxns.emitters import (
    SEVAL_CALL,
    annotate_documentation,
    build_linkage_table,
    regenerate_input_deck,
    write_documentation,
    write_input_decks,
)
from tuvrxns.errors import ConfigurationMismatchError, StructuralParseError
from tuvrxns.flags import FlagPolicy, compute_flags
from tuvrxns.registry import ReactionRegistry
from tuvrxns.report import SetrxnsReport


@pytest.fixture
def registry():
    return ReactionRegistry(["A", "B", "C"])


def test_linkage_table_scaling(registry):
    database = ReactionDatabase(
        "MCMv32",
        (ExternalDatabaseEntry(1, "B", 1.0), ExternalDatabaseEntry(2, "C", 0.5)),
    )
    assert build_linkage_table(registry, database) == [
        "  SELECT CASE (jl)",
        "    CASE(2) ! B",
        f"      j(1) = {SEVAL_CALL}",
        "    CASE(3) ! C",
        f"      j(2) = {SEVAL_CALL}*0.500",
        "  END SELECT",
    ]


def test_linkage_table_groups_entries_and_skips_missing(registry):
    database = ReactionDatabase(
        "MCMv331",
        (
            ExternalDatabaseEntry(4, "C"),
            ExternalDatabaseEntry(7, "X"),
            ExternalDatabaseEntry(5, "C"),
            ExternalDatabaseEntry(6, "A"),
        ),
    )
    report = SetrxnsReport()
    lines = build_linkage_table(registry, database, report, "MCMv331.inc")
    assert lines[1:-1] == [
        "    CASE(3) ! C",
        f"      j(4) = {SEVAL_CALL}",
        f"      j(5) = {SEVAL_CALL}",
        "    CASE(1) ! A",
        f"      j(6) = {SEVAL_CALL}",
    ]
    assert report.misses_for("MCMv331", "MCMv331.inc") == ["X"]


def test_input_deck_regeneration(registry):
    lines = ["head"] + make_deck("TT", ["old 1", "old 2"], n_active=2) + ["tail"]
    flags = np.array([True, False, True])
    new = regenerate_input_deck(lines, registry, flags)
    assert new == [
        "head",
        "Title: test input",
        "=================== Input parameters ====================",
        "nstr =   -2   iout =   30   nmj =   2",
        "=================== photolysis reactions ================",
        "T  1 A",
        "F  2 B",
        "T  3 C",
        "==========================================================",
        "tail",
    ]


@pytest.mark.parametrize(
    "flags", [[False] * 12, [True] * 12, [True, False] * 6, [False] * 11 + [True]]
)
def test_count_line_matches_active_flags(flags):
    registry = ReactionRegistry([f"R{i}" for i in range(12)])
    lines = make_deck("T", ["x"], n_active=1)
    new = regenerate_input_deck(lines, registry, np.array(flags))
    assert int(new[2][-3:]) == sum(flags)
    assert new[2][:-3] == lines[2][:-3]


def test_flags_must_match_registry(registry):
    with pytest.raises(ValueError):
        regenerate_input_deck(make_deck("T", ["x"]), registry, np.array([True]))


def test_preserved_flags_round_trip(registry):
    lines = make_deck("FTFTT", ["a", "b", "c", "d", "e"])
    flags = compute_flags(FlagPolicy.PRESERVE_EXISTING, registry, existing_lines=lines)
    first = regenerate_input_deck(lines, registry, flags)
    again = compute_flags(FlagPolicy.PRESERVE_EXISTING, registry, existing_lines=first)
    second = regenerate_input_deck(first, registry, again)
    assert np.array_equal(flags, again)
    assert second == first


def test_broken_deck_does_not_stop_siblings(tmp_path, registry):
    good = tmp_path / "good"
    bad = tmp_path / "bad"
    good.write_text("\n".join(make_deck("TTT", ["A", "B", "C"], 3)) + "\n")
    bad.write_text("no markers here\n")
    report = SetrxnsReport()

    def flags_for(lines, artifact):
        return compute_flags(FlagPolicy.PRESERVE_EXISTING, registry, existing_lines=lines)

    written = write_input_decks([bad, good], registry, flags_for, report)
    assert written == [good]
    assert "bad" in report.failures
    assert bad.read_text() == "no markers here\n"


def test_missing_count_line_is_structural(registry):
    lines = [line for line in make_deck("TTT", ["A", "B", "C"]) if "nmj" not in line]
    with pytest.raises(StructuralParseError):
        regenerate_input_deck(lines, registry, np.ones(3, dtype=bool))


@pytest.fixture
def wiki_database():
    return ReactionDatabase(
        "MCMv331",
        (
            ExternalDatabaseEntry(1, "C"),
            ExternalDatabaseEntry(2, "A"),
            ExternalDatabaseEntry(3, "C"),
            ExternalDatabaseEntry(4, "Z"),
            ExternalDatabaseEntry(5, "B"),
        ),
    )


def test_documentation_annotation(registry, wiki_database):
    template = [
        "| J | TUV | reaction |",
        "J(1) | C -> products",
        "J(2) | A -> products",
        "J(4) | Z -> products",
    ]
    report = SetrxnsReport()
    wiki, counter = annotate_documentation(template, registry, wiki_database, 6, report)
    assert counter == 2
    assert wiki == [
        "| J | TUV | reaction |",
        "J(1)   |   3 | J(1) | C -> products",
        "J(2)   |   1 | J(2) | A -> products",
        "J(4) | Z -> products",
    ]
    assert report.misses_for("MCMv331") == ["Z"]
    assert template[1] == "J(1) | C -> products"


def test_documentation_writes_outputs(tmp_path, registry, wiki_database):
    template = tmp_path / "wiki.md"
    template.write_text("J(2) | A\nJ(5) | B\n")
    output = tmp_path / "wiki_tuv.md"
    report = SetrxnsReport()
    write_documentation([template], [output], 5, [wiki_database], registry, report)
    assert output.read_text(encoding="utf-8") == "J(2)  |   1 | J(2) | A\nJ(5)  |   2 | J(5) | B\n"
    assert report.annotations == {"wiki_tuv.md": 2}


def test_documentation_count_mismatch(tmp_path, registry, wiki_database):
    with pytest.raises(ConfigurationMismatchError):
        write_documentation(
            [tmp_path / "a.md", tmp_path / "b.md"],
            [tmp_path / "a_out.md"],
            10,
            [wiki_database, wiki_database],
            registry,
            SetrxnsReport(),
        )


def test_documentation_row_annotated_once(registry):
    database = ReactionDatabase(
        "MCMv331", (ExternalDatabaseEntry(1, "B"), ExternalDatabaseEntry(1, "A"))
    )
    wiki, counter = annotate_documentation(["J(1) | row"], registry, database, 5)
    assert wiki == ["J(1)  |   2 | J(1) | row"]
    assert counter == 1
