"""
Plain-text fit reports.

Regression reports list the symbolic equation, the raw coefficients, the
equation with numbers substituted and the goodness-of-fit statistics.
Interpolation reports list every linear segment of the point table.
"""

from __future__ import annotations

import math
from typing import NamedTuple, Sequence

from .fitting import FitResult, LineCoefficients, Point, log_label
from .numeric import format_number


class Segment(NamedTuple):
    index: int
    x0: float
    y0: float
    x1: float
    y1: float
    m: float
    c: float


def interpolation_segments(points: Sequence[Point]) -> list[Segment]:
    """Linear pieces between consecutive points (sorted by x).

    A vertical piece (equal x) has slope NaN and intercept y0.
    """
    pts = sorted(points, key=lambda p: p.x)
    segments = []
    for i, (p0, p1) in enumerate(zip(pts, pts[1:]), start=1):
        dx = p1.x - p0.x
        m = math.nan if dx == 0 else (p1.y - p0.y) / dx
        c = p0.y - (0.0 if math.isnan(m) else m * p0.x)
        segments.append(Segment(i, p0.x, p0.y, p1.x, p1.y, m, c))
    return segments


def report_filename(result: FitResult) -> str:
    return f"curvelab_report_{result.model or 'report'}.txt"


def build_report(result: FitResult) -> str:
    if result.model == "interpolation":
        return _interpolation_report(result)
    return _regression_report(result)


def _symbolic_equation(result: FitResult) -> str:
    model = result.model
    coeffs = result.coefficients
    if model == "linear" and isinstance(coeffs, LineCoefficients):
        return "y = m x + c"
    if model == "linear":
        terms = ["b0"] + [f"b{i} {key}" for i, key in enumerate(result.x_keys, start=1)]
        return "y = " + " + ".join(terms)
    if model == "polynomial":
        return "y = " + " + ".join(f"a{i} x^{i}" for i in range(len(coeffs)))
    if model == "exponential":
        return "y = a e^(b x)"
    if model == "powerlaw":
        return "y = a x^b"
    if model == "logarithmic":
        return f"y = a {log_label(coeffs.base)}(x) + b"
    return result.equation


def _coefficient_lines(result: FitResult) -> tuple[list[str], str]:
    model = result.model
    coeffs = result.coefficients
    f = format_number

    if model == "linear" and isinstance(coeffs, LineCoefficients):
        return ([f"  m = {f(coeffs.m)}", f"  c = {f(coeffs.c)}"],
                f"y = {f(coeffs.m)} x + {f(coeffs.c)}")
    if model == "linear":
        lines = [f"  b0 = {f(coeffs[0])}"]
        lines += [f"  b{i} = {f(b)}  ({key})"
                  for i, (b, key) in enumerate(zip(coeffs[1:], result.x_keys), start=1)]
        impl = " + ".join([f(coeffs[0])] + [f"{f(b)} {key}" for b, key in zip(coeffs[1:], result.x_keys)])
        return lines, f"y = {impl}"
    if model == "polynomial":
        lines = [f"  a{i} = {f(v)}" for i, v in enumerate(coeffs)]
        return lines, "y = " + " + ".join(f"{f(v)} x^{i}" for i, v in enumerate(coeffs))
    if model == "exponential":
        return ([f"  a = {f(coeffs.a)}", f"  b = {f(coeffs.b)}"],
                f"y = {f(coeffs.a)} e^({f(coeffs.b)} x)")
    if model == "powerlaw":
        return ([f"  a = {f(coeffs.a)}", f"  b = {f(coeffs.b)}"],
                f"y = {f(coeffs.a)} x^({f(coeffs.b)})")
    if model == "logarithmic":
        return ([f"  a = {f(coeffs.a)}", f"  b = {f(coeffs.b)}", f"  base = {coeffs.base}"],
                f"y = {f(coeffs.a)} {log_label(coeffs.base)}(x) + {f(coeffs.b)}")
    return [], result.equation


def _regression_report(result: FitResult) -> str:
    lines = [f"{result.model.upper()} REPORT", ""]

    lines.append("Equation:")
    lines.append(f"  {_symbolic_equation(result)}")
    lines.append("")

    coeff_lines, implementation = _coefficient_lines(result)
    lines.append("Coefficients:")
    lines.extend(coeff_lines)
    lines.append("")
    lines.append("Implementation:")
    lines.append(f"  {implementation}")
    lines.append("")

    if result.stats is not None:
        lines.append("Statistics:")
        lines.append(f"  R² = {format_number(result.stats.r2)}")
        lines.append(f"  RMSE = {format_number(result.stats.rmse)}")
        lines.append(f"  n = {result.stats.n}")
        lines.append("")

    if result.domain_warnings:
        lines.append("Excluded points:")
        lines.extend(f"  {w}" for w in result.domain_warnings)
        lines.append("")

    return "\n".join(lines)


def _interpolation_report(result: FitResult) -> str:
    lines = ["INTERPOLATION REPORT", ""]
    points = result.coefficients

    if len(points) < 2:
        lines.append("Not enough points for interpolation.")
        return "\n".join(lines)

    segments = interpolation_segments(points)
    f = format_number

    lines.append(f"Total points: {len(points)}")
    lines.append(f"Total segments: {len(segments)}")
    lines.append("")
    lines.append("Segments:")
    lines.append("")

    for s in segments:
        lines.append(f"Segment {s.index}:")
        lines.append(f"  x0 = {f(s.x0)}")
        lines.append(f"  y0 = {f(s.y0)}")
        lines.append(f"  x1 = {f(s.x1)}")
        lines.append(f"  y1 = {f(s.y1)}")
        lines.append(f"  m  = {f(s.m)}")
        lines.append(f"  c  = {f(s.c)}")
        lines.append(f"  equation: y = {f(s.m)} x + {f(s.c)}")
        lines.append("")

    return "\n".join(lines)
