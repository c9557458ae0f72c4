import pytest

from tuvrxns.errors import StructuralParseError
from tuvrxns.parsing import (
    LineKind,
    classify_line,
    extract_call_target,
    extract_label,
    extract_subroutine_name,
    locate_count_line,
    locate_mechanism_section,
    tokenize,
)

classification_data = [
    ("      SUBROUTINE r01(nw,wl)", LineKind.SUBROUTINE),
    ("\tsubroutine pxCH2O(nw)", LineKind.SUBROUTINE),
    ("      jlabel(j) = 'O3 -> O2 + O(1D)'", LineKind.LABEL),
    ("      JLABEL(j) = 'O3 -> O2 + O(1D)'", LineKind.LABEL),
    ("      CALL r01(nw,wl)", LineKind.CALL),
    ("      call r01", LineKind.CALL),
    ("*     CALL r01(nw,wl)", LineKind.OTHER),
    ("C     subroutine r01(nw)", LineKind.OTHER),
    ("      callme = 1", LineKind.OTHER),
    ("      j = j+1", LineKind.OTHER),
    ("", LineKind.OTHER),
]


@pytest.mark.parametrize("line, expected", classification_data)
def test_classify_line(line, expected):
    assert classify_line(line) == expected


@pytest.mark.parametrize(
    "line, name",
    [
        ("      SUBROUTINE r01(nw,wl)", "r01"),
        ("      subroutine   pxCH2O (nw,wl)", "pxCH2O"),
    ],
)
def test_extract_subroutine_name(line, name):
    assert extract_subroutine_name(line) == name


def test_subroutine_without_arguments_is_malformed():
    with pytest.raises(StructuralParseError):
        extract_subroutine_name("      SUBROUTINE r01")


@pytest.mark.parametrize(
    "line, label",
    [
        ("      jlabel(j) = 'O3 -> O2 + O(1D)'", "O3 -> O2 + O(1D)"),
        ('      jlabel(j) = "CH2O -> H2 + CO"', "CH2O -> H2 + CO"),
        ("      jlabel(j) = \"CH3C(O)OOH -> 'x' + OH\"", "CH3C(O)OOH -> 'x' + OH"),
        ("      jlabel(j) = 'a' // 'b'", "a"),
    ],
)
def test_extract_label(line, label):
    assert extract_label(line) == label


def test_label_without_quotes_is_malformed():
    with pytest.raises(StructuralParseError):
        extract_label("      jlabel(j) = lbl")


@pytest.mark.parametrize(
    "line, target",
    [
        ("      CALL r01(nw,wl,wc)", "r01"),
        ("      call r02 (nw,wl)", "r02"),
        ("      CALL pxCH2O", "pxCH2O"),
    ],
)
def test_extract_call_target(line, target):
    assert extract_call_target(line) == target


def test_tokenize_keeps_source_order_and_line_numbers():
    lines = [
        "      SUBROUTINE r01(nw)",
        "      j = j+1",
        "      jlabel(j) = 'A'",
        "      CALL r02(nw)",
    ]
    tokens = tokenize(lines)
    assert [(t.number, t.kind, t.token) for t in tokens] == [
        (1, LineKind.SUBROUTINE, "r01"),
        (3, LineKind.LABEL, "A"),
        (4, LineKind.CALL, "r02"),
    ]
    assert [t.token for t in tokenize(lines, (LineKind.CALL,))] == ["r02"]


def test_tokenize_error_names_file_and_line():
    with pytest.raises(StructuralParseError) as error:
        tokenize(["      x = 1", "      jlabel(j) = label"], source="rxn.f")
    assert error.value.context["file"] == "rxn.f"
    assert error.value.context["line_number"] == 2
    assert "rxn.f" in error.value.log_message()


def test_locate_mechanism_section_uses_last_end_marker():
    lines = [
        "=== Input ===",
        "nmj =   1",
        "=== photolysis reactions ===",
        "T  1 A",
        "=== end ===",
        "trailer",
    ]
    assert locate_mechanism_section(lines) == (2, 4)
    assert locate_count_line(lines) == 1


@pytest.mark.parametrize(
    "lines",
    [
        ["nmj =   1", "T  1 A", "====="],
        ["nmj =   1", "===== photolysis reactions", "T  1 A"],
    ],
)
def test_missing_markers(lines):
    with pytest.raises(StructuralParseError):
        locate_mechanism_section(lines, "usrinp")


def test_missing_count_line():
    with pytest.raises(StructuralParseError):
        locate_count_line(["=== photolysis reactions", "====="], "usrinp")
