from __future__ import annotations

from typing import Callable

import sympy as sp

from .config import MAX_LATEX_SEGMENTS
from .fitting import FitResult, LineCoefficients
from .report import interpolation_segments


class LaTeXGenerator:
    """Converts FitResult -> display-math LaTeX string.

    Parameters
    ----------
    approx : bool
        When True (default) all numeric coefficients are rendered as
        rounded decimals with *decimals* digits after the point.
        When False, rational approximations are used.
    decimals : int
        Number of digits after the decimal point in approximate mode.
    """

    def __init__(self, approx: bool = True, decimals: int = 3) -> None:
        self.approx = approx
        self.decimals = max(0, min(10, int(decimals)))
        self._dispatch: dict[str, Callable[[FitResult], str]] = {
            "linear":        self._linear,
            "polynomial":    self._polynomial,
            "exponential":   self._exponential,
            "powerlaw":      self._powerlaw,
            "logarithmic":   self._logarithmic,
            "interpolation": self._interpolation,
        }

    def generate(self, result: FitResult) -> str:
        try:
            handler = self._dispatch.get(result.model)
            return handler(result) if handler is not None else self._fallback(result)
        except (KeyError, TypeError, AttributeError, ValueError, ArithmeticError):
            return self._fallback(result)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _n(self, v: float) -> sp.Expr:
        """Float in approx mode, otherwise a rational with denominator <= 10000."""
        if self.approx:
            return sp.Float(f"{v:.{self.decimals}f}")
        return sp.Rational(v).limit_denominator(10000)

    def _round_floats(self, expr: sp.Basic) -> sp.Basic:
        if isinstance(expr, sp.Float):
            return sp.Float(f"{float(expr):.{self.decimals}f}")
        if expr.args:
            return expr.func(*[self._round_floats(a) for a in expr.args])
        return expr

    def _latex(self, expr: sp.Basic) -> str:
        if self.approx:
            return sp.latex(self._round_floats(expr))
        return sp.latex(expr)

    def _wrap(self, expr: sp.Basic) -> str:
        return f"$$y = {self._latex(expr)}$$"

    # ------------------------------------------------------------------
    # Per-model generators
    # ------------------------------------------------------------------

    def _linear(self, result: FitResult) -> str:
        coeffs = result.coefficients
        if isinstance(coeffs, LineCoefficients):
            x = sp.Symbol("x")
            return self._wrap(self._n(coeffs.m) * x + self._n(coeffs.c))
        expr: sp.Expr = self._n(coeffs[0])
        for b, key in zip(coeffs[1:], result.x_keys):
            expr += self._n(b) * sp.Symbol(key)
        return self._wrap(expr)

    def _polynomial(self, result: FitResult) -> str:
        x = sp.Symbol("x")
        expr = sp.Add(*[self._n(c) * x ** p for p, c in enumerate(result.coefficients)])
        return self._wrap(expr)

    def _exponential(self, result: FitResult) -> str:
        x = sp.Symbol("x")
        a = self._n(result.coefficients.a)
        b = self._n(result.coefficients.b)
        return self._wrap(a * sp.exp(b * x))

    def _powerlaw(self, result: FitResult) -> str:
        x = sp.Symbol("x")
        a = self._n(result.coefficients.a)
        b = self._n(result.coefficients.b)
        return self._wrap(a * x ** b)

    def _logarithmic(self, result: FitResult) -> str:
        x = sp.Symbol("x")
        coeffs = result.coefficients
        a = self._n(coeffs.a)
        b = self._n(coeffs.b)
        if coeffs.base == "ln":
            return self._wrap(a * sp.ln(x) + b)
        base = coeffs.base[3:]
        # sp.log(x, 10) would rewrite to log(x)/log(10)
        return f"$$y = {self._latex(a)} \\log_{{{base}}}(x) + {self._latex(b)}$$"

    def _interpolation(self, result: FitResult) -> str:
        segments = interpolation_segments(result.coefficients)
        if not segments:
            return "$$y = \\text{not enough points for interpolation}$$"
        if len(segments) > MAX_LATEX_SEGMENTS:
            return f"$$y = \\text{{piecewise-linear with {len(segments)} segments}}$$"

        x = sp.Symbol("x")
        cases = []
        for s in segments:
            if s.m != s.m:      # vertical piece
                continue
            seg = self._latex(self._n(s.m) * x + self._n(s.c))
            cases.append(f"{seg} & x \\in [{s.x0:.3f}, {s.x1:.3f}]")

        cases_str = " \\\\\n".join(cases)
        return f"$$y = \\begin{{cases}}\n{cases_str}\n\\end{{cases}}$$"

    @staticmethod
    def _fallback(result: FitResult) -> str:
        return f"$$\\text{{{result.equation}}}$$"
