"""Markdown table of the MCM/GECKO-A photolysis parameters derived with MCMphotolysis."""

import logging
import math
import os
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd

from . import io_functions as io

DEFAULT_HEADER = Path(__file__).parent / "data" / "params_header.md"
STANDARD_OZONE_COLUMN = 350.0


def order_of_magnitude(value: float) -> int:
    if value == 0:
        return 0
    return int(math.floor(math.log10(abs(value))))


def format_float(value: float, error: float) -> str:
    """Return ``"(X.XXX±Y.YYY)·10<sup>Z</sup>"`` with both numbers reduced by the
    order of magnitude Z of ``value``.
    """
    o = order_of_magnitude(value)
    return f"({value / 10.0**o:.3f}±{error / 10.0**o:.3f})·10<sup>{o}</sup>"


def l_parameter(ozone_column: float, p: Sequence[float]) -> float:
    """l / s^-1 = p0 + p1·exp(-O3/p2) + p3·exp(-O3/p4)"""
    return float(p[0] + p[1] * np.exp(-ozone_column / p[2]) + p[3] * np.exp(-ozone_column / p[4]))


def format_parameter_row(row: Sequence) -> str:
    """Format one row of the MCMphotolysis parameter file.

    Positions 0-6 hold l_a0, l_b0, l_b1, l_c0, l_c1, m and n, positions 7-13 their
    errors; the last three columns are the MCM label, the TUV number and the reaction.
    """
    values = [float(x) for x in row[:14]]
    la0 = format_float(values[0], values[7])
    lb0 = format_float(values[1], values[8])
    lb1 = f"{values[2]:8.2f}±{values[9]:.2f}"
    lc0 = format_float(values[3], values[10])
    lc1 = f"{values[4]:8.2f}±{values[11]:.2f}"
    l = l_parameter(STANDARD_OZONE_COLUMN, values[:5])
    o = order_of_magnitude(l)
    mantissa = l / 10.0**o
    label, tuv_number, reaction = row[-3], int(row[-2]), row[-1]
    return (
        f"{str(label).ljust(8):>10s}  | {tuv_number:3d} |{la0:>30s} |{lb0:>30s} |"
        f"{lb1.ljust(16)}|{lc0:>30s} |{lc1.ljust(16)}| {mantissa:6.3f}·10<sup>{o}</sup> |"
        f"{values[5]:6.3f}±{values[12]:.3f} |{values[6]:6.3f}±{values[13]:.3f} | {reaction}"
    )


def write_params(
    input_file: Union[str, os.PathLike],
    output_file: Union[str, os.PathLike],
    header_file: Optional[Union[str, os.PathLike]] = None,
) -> int:
    """Write the parameters of ``input_file`` (``;``-separated, one header row) to a
    markdown table in ``output_file``.

    Returns:
        int: The number of reactions written.
    """
    header = io.read_lines(header_file or DEFAULT_HEADER)
    params = pd.read_csv(input_file, sep=";", header=0, skipinitialspace=True)
    rows = [format_parameter_row(list(row)) for row in params.itertuples(index=False)]
    io.write_lines(output_file, header + rows)
    logging.info(
        f"MCM/GECKO-A parameters for {len(rows)} reactions written to {Path(output_file).name}."
    )
    return len(rows)
