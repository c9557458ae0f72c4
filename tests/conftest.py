"""Synthetic TUV tree shared by the tests.

The tree mimics TUV 5.x: reaction subroutines in ``rxn*.f`` files, their calls in
``swchem.f`` (processed first) and ``swaddl.f`` (processed second), and the O2
photolysis label in ``swchem.f``.
"""

from pathlib import Path

import pytest

RXN_F = """\
      SUBROUTINE r01(nw,wl,wc,nz,tlev,airden,j,sq,jlabel)
*  O3 photolysis
      j = j+1
      jlabel(j) = 'O3 -> O2 + O(1D)'
      j = j+1
      jlabel(j) = 'O3 -> O2 + O(3P)'
      END

      SUBROUTINE r02(nw,wl,wc,nz,tlev,airden,j,sq,jlabel)
      j = j+1
      jlabel(j) = 'NO2 -> NO + O(3P)'
      END
"""

RXN_ADDL_F = """\
      SUBROUTINE pxCH2O(nw,wl,wc,nz,tlev,airden,j,sq,jlabel)
      j = j+1
      JLABEL(j) = 'CH2O -> H + HCO'
      j = j+1
      jlabel(j) = "CH2O -> H2 + CO"
      END
"""

SWCHEM_F = """\
      SUBROUTINE swchem(nw,wl,nz,tlev,airden,nj,sq,jlabel,tpflag)
      j = 1
      jlabel(j) = 'O2 -> O + O '
      CALL r01(nw,wl,wc,nz,tlev,airden,j,sq,jlabel)
      call r02(nw,wl,wc,nz,tlev,airden,j,sq,jlabel)
      END
"""

SWADDL_F = """\
      SUBROUTINE swaddl(nw,wl,nz,tlev,airden,j,sq,jlabel)
      CALL pxCH2O(nw,wl,wc,nz,tlev,airden,j,sq,jlabel)
      END
"""

REGISTRY_LABELS = [
    "O2 -> O + O",
    "O3 -> O2 + O(1D)",
    "O3 -> O2 + O(3P)",
    "NO2 -> NO + O(3P)",
    "CH2O -> H + HCO",
    "CH2O -> H2 + CO",
]

MCMV32_DB = """\
J|SF|TUV label
1|1.0|O3 -> O2 + O(1D)
3|0.5|O3 -> O2 + O(1D)
4|1|NO2 -> NO + O(3P)
"""

MCMV331_DB = """\
MCM|TUV label
 1|O3 -> O2 + O(1D)
 2|O3 -> O2 + O(3P)
 4|NO2 -> NO + O(3P)
11|CH2O -> H + HCO
99|HONO -> OH + NO
"""

GECKO_DB = """\
MCM|TUV label
 1|O3 -> O2 + O(1D)
12|CH2O -> H2 + CO
"""


def make_deck(flags, labels, n_active=0):
    """Lines of a TUV input file with the given reaction flags."""
    header = [
        "Title: test input",
        "=================== Input parameters ====================",
        f"nstr =   -2   iout =   30   nmj = {n_active:3d}",
        "=================== photolysis reactions ================",
    ]
    reactions = [f"{flag}{i:3d} {label}" for i, (flag, label) in enumerate(zip(flags, labels), 1)]
    footer = ["=========================================================="]
    return header + reactions + footer


def write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def tuv_tree(tmp_path):
    """A TUV directory with reaction sources and two input files."""
    tuv = tmp_path / "TUV"
    rxn = tuv / "SRC" / "RXN"
    write_file(rxn / "rxn.f", RXN_F)
    write_file(rxn / "rxn_addl.f", RXN_ADDL_F)
    write_file(rxn / "swchem.f", SWCHEM_F)
    write_file(rxn / "swaddl.f", SWADDL_F)
    write_file(rxn / "swchem.o", "binary")
    deck = make_deck("TFT", REGISTRY_LABELS[:3], n_active=2)
    write_file(tuv / "INPUTS" / "usrinp", "\n".join(deck) + "\n")
    write_file(tuv / "INPUTS" / "defin1", "\n".join(deck) + "\n")
    return tuv


@pytest.fixture
def database_dir(tmp_path):
    data = tmp_path / "data"
    write_file(data / "MCMv32.db", MCMV32_DB)
    write_file(data / "MCMv331.db", MCMV331_DB)
    write_file(data / "MCM-GECKO-A.db", GECKO_DB)
    return data
