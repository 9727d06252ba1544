"""
Evaluation of fitted models on new X values, for plotting callers.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.interpolate import interp1d

from .config import DEFAULT_SAMPLE_COUNT
from .extraction import Failure
from .fitting import LOG_FUNCTIONS, FitResult

FloatArray = NDArray[np.float64]


def predict(result: FitResult, x: Any) -> FloatArray:
    """Evaluate a single-X fit at *x*.

    Values where the model is undefined (log of a non-positive X, or X
    outside the interpolation table) come back as NaN.
    """
    if result.is_multivariable:
        raise ValueError("predict() needs a single-X fit; multivariable models take one array per X")

    x = np.asarray(x, dtype=np.float64)
    coeffs = result.coefficients

    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        if result.model == "linear":
            y = coeffs.m * x + coeffs.c
        elif result.model == "polynomial":
            y = np.polynomial.polynomial.polyval(x, np.asarray(coeffs))
        elif result.model == "exponential":
            y = coeffs.a * np.exp(coeffs.b * x)
        elif result.model == "powerlaw":
            y = coeffs.a * np.power(x, coeffs.b)
        elif result.model == "logarithmic":
            y = coeffs.a * LOG_FUNCTIONS[coeffs.base](x) + coeffs.b
        elif result.model == "interpolation":
            y = _interpolate(coeffs, x)
        else:
            raise ValueError(f"Unknown model '{result.model}'")

    y = np.asarray(y, dtype=np.float64)
    y[~np.isfinite(y)] = np.nan
    return y


def _interpolate(points, x: FloatArray) -> FloatArray:
    xs = np.array([p.x for p in points], dtype=np.float64)
    ys = np.array([p.y for p in points], dtype=np.float64)
    if len(xs) < 2:
        return np.where(x == xs[0], ys[0], np.nan) if len(xs) else np.full_like(x, np.nan)
    f = interp1d(xs, ys, kind='linear', bounds_error=False, fill_value=np.nan,
                 assume_sorted=True)
    return np.asarray(f(x), dtype=np.float64)


def sample_curve(result: FitResult | Failure,
                 count: int = DEFAULT_SAMPLE_COUNT) -> tuple[FloatArray, FloatArray]:
    """Evenly spaced samples of the fitted curve across the observed X range.

    Failures and multivariable fits have no single curve and give empty arrays.
    """
    empty = np.array([], dtype=np.float64)
    if not result.ok or result.is_multivariable or count < 2:
        return empty, empty

    x = result.x[0]
    if len(x) == 0:
        return empty, empty
    xs = np.linspace(float(np.min(x)), float(np.max(x)), count)
    return xs, predict(result, xs)
