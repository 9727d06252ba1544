"""
Regression models for extracted (X, Y) data.

Models
------
1.  Linear (single X)          closed-form least squares, y = m·x + c
2.  Linear (multiple X)        normal equations, y = b0 + b1·X1 + ... + bk·Xk
3.  Polynomial                 normal equations on a Vandermonde design
4.  Exponential                y = a·e^(b·x), fitted as ln(y) against x
5.  Power law                  y = a·x^b, fitted as ln(y) against ln(x)
6.  Logarithmic                y = a·log(x) + b, base 10, e or 2
7.  Interpolation              sorted point table, no statistics

Every fitter returns a ``FitResult`` or a ``Failure``; nothing is raised
across ``fit_model`` / ``run_model`` for bad data or configuration.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from .config import FitConfig
from .extraction import (
    KIND_CONFIG,
    KIND_DATA,
    KIND_DEGENERATE,
    KIND_VALIDATION,
    ExtractedData,
    Failure,
    extract_data,
)
from .linalg import solve_linear_system
from .numeric import format_number

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

FloatArray = NDArray[np.float64]
BoolArray = NDArray[np.bool_]

LOG_FUNCTIONS: dict[str, Callable[[FloatArray], FloatArray]] = {
    "log10": np.log10,
    "ln": np.log,
    "log2": np.log2,
}


# ===========================================================================
# Result types
# ===========================================================================

class LineCoefficients(NamedTuple):
    m: float
    c: float


class ScaleCoefficients(NamedTuple):
    a: float
    b: float


class LogCoefficients(NamedTuple):
    a: float
    b: float
    base: str


class Point(NamedTuple):
    x: float
    y: float


Coefficients = Union[
    LineCoefficients,
    ScaleCoefficients,
    LogCoefficients,
    tuple[float, ...],
    tuple[Point, ...],
]


@dataclass(frozen=True, slots=True)
class FitStats:
    r2: float
    rmse: float
    n: int


@dataclass(frozen=True, eq=False)
class FitResult:
    """
    Successful fit.

    ``coefficients`` depends on ``model``: ``LineCoefficients`` for
    single-X linear, a tuple ``(b0, b1, ...)`` for multivariable linear and
    polynomial (ascending powers), ``ScaleCoefficients`` for exponential and
    power law, ``LogCoefficients`` for logarithmic and a tuple of ``Point``
    sorted by x for interpolation.

    ``stats``, ``y_pred`` and ``residuals`` are None for interpolation.
    When points were excluded from a log-linearized fit, ``stats`` covers
    the included points only and ``excluded_rows`` names the others.
    """
    model: str
    coefficients: Coefficients
    equation: str
    x: tuple[FloatArray, ...]
    y: FloatArray
    x_keys: tuple[str, ...]
    stats: Optional[FitStats] = None
    y_pred: Optional[FloatArray] = None
    residuals: Optional[FloatArray] = None
    degree: Optional[int] = None
    warnings: tuple[str, ...] = ()
    domain_warnings: tuple[str, ...] = ()
    excluded_rows: tuple[int, ...] = ()

    @property
    def ok(self) -> bool:
        return True

    @property
    def is_multivariable(self) -> bool:
        return len(self.x) > 1

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view; non-finite numbers become None."""
        out: dict[str, Any] = {
            "ok": True,
            "model": self.model,
            "coefficients": _coefficients_to_json(self.coefficients),
            "equation": self.equation,
            "x": [_floats_to_json(col) for col in self.x],
            "y": _floats_to_json(self.y),
            "xKeys": list(self.x_keys),
            "warnings": list(self.warnings),
            "domainWarnings": list(self.domain_warnings),
        }
        if self.stats is not None:
            out["stats"] = {
                "r2": _float_to_json(self.stats.r2),
                "rmse": _float_to_json(self.stats.rmse),
                "n": self.stats.n,
            }
        if self.y_pred is not None:
            out["yPred"] = _floats_to_json(self.y_pred)
        if self.residuals is not None:
            out["residuals"] = _floats_to_json(self.residuals)
        if self.degree is not None:
            out["degree"] = self.degree
        if self.excluded_rows:
            out["excludedRows"] = list(self.excluded_rows)
        return out


FitOutcome = Union[FitResult, Failure]


def _float_to_json(v: float) -> Optional[float]:
    v = float(v)
    return v if np.isfinite(v) else None


def _floats_to_json(values: Sequence[float]) -> list[Optional[float]]:
    return [_float_to_json(v) for v in values]


def _coefficients_to_json(coefficients: Coefficients) -> Any:
    if isinstance(coefficients, (LineCoefficients, ScaleCoefficients)):
        return {k: _float_to_json(v) for k, v in coefficients._asdict().items()}
    if isinstance(coefficients, LogCoefficients):
        return {"a": _float_to_json(coefficients.a),
                "b": _float_to_json(coefficients.b),
                "base": coefficients.base}
    if coefficients and isinstance(coefficients[0], Point):
        return [{"x": p.x, "y": p.y} for p in coefficients]
    return _floats_to_json(coefficients)


# ===========================================================================
# Shared statistics and the single-X linear primitive
# ===========================================================================

def r2_score(y: FloatArray, y_pred: FloatArray) -> float:
    """Coefficient of determination; 1.0 when all Y are identical."""
    y = np.asarray(y, dtype=np.float64)
    y_pred = np.asarray(y_pred, dtype=np.float64)
    if len(y) == 0 or np.all(y == y[0]):
        return 1.0
    ss_tot = float(np.sum((y - np.mean(y)) ** 2))
    if ss_tot == 0.0:
        return 1.0
    ss_res = float(np.sum((y - y_pred) ** 2))
    return 1.0 - ss_res / ss_tot


def rmse(residuals: FloatArray) -> float:
    residuals = np.asarray(residuals, dtype=np.float64)
    return float(np.sqrt(np.mean(residuals ** 2)))


def linear_regression(x: FloatArray, y: FloatArray) -> Optional[tuple[float, float]]:
    """Least-squares line y ~ m*x + c. Returns (m, c), or None for constant X."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if len(x) == 0 or np.all(x == x[0]):
        return None
    x_mean = float(np.mean(x))
    y_mean = float(np.mean(y))
    dx = x - x_mean
    den = float(np.sum(dx * dx))
    if den == 0.0:
        return None
    m = float(np.sum(dx * (y - y_mean))) / den
    return m, y_mean - m * x_mean


def _normal_equations(design: FloatArray, y: FloatArray) -> Optional[FloatArray]:
    return solve_linear_system(design.T @ design, design.T @ y)


def _regression_result(
    model: str,
    coefficients: Coefficients,
    equation: str,
    data: ExtractedData,
    y_pred: FloatArray,
    mask: Optional[BoolArray] = None,
    domain_warnings: Sequence[str] = (),
    excluded_rows: Sequence[int] = (),
    degree: Optional[int] = None,
) -> FitOutcome:
    """Assemble a FitResult; statistics use only the points selected by *mask*."""
    y_pred = np.asarray(y_pred, dtype=np.float64)
    residuals = data.y - y_pred
    used = np.ones(data.n, dtype=bool) if mask is None else mask

    if not np.all(np.isfinite(y_pred[used])):
        return Failure(
            KIND_DEGENERATE,
            f"{model.capitalize()} fit produced non-finite predictions",
            data.warnings + tuple(domain_warnings),
        )

    stats = FitStats(
        r2=r2_score(data.y[used], y_pred[used]),
        rmse=rmse(residuals[used]),
        n=int(np.count_nonzero(used)),
    )
    return FitResult(
        model=model,
        coefficients=coefficients,
        equation=equation,
        x=data.x,
        y=data.y,
        x_keys=data.x_keys,
        stats=stats,
        y_pred=y_pred,
        residuals=residuals,
        degree=degree,
        warnings=data.warnings,
        domain_warnings=tuple(domain_warnings),
        excluded_rows=tuple(excluded_rows),
    )


def _zero_variance(data: ExtractedData, extra: Sequence[str] = ()) -> Failure:
    return Failure(KIND_DEGENERATE, "X variance is zero; cannot compute slope",
                   data.warnings + tuple(extra))


def _domain_filter(
    data: ExtractedData, checks: Sequence[tuple[str, FloatArray]]
) -> tuple[BoolArray, list[str], list[int]]:
    """Select points where every checked array is strictly positive.

    Returns (mask, warnings, excluded row indices); one warning per
    excluded point, naming the source table row.
    """
    mask = np.ones(data.n, dtype=bool)
    for _, values in checks:
        mask &= values > 0

    warnings: list[str] = []
    excluded: list[int] = []
    for i in np.flatnonzero(~mask):
        row = data.rows_index_map[i] if i < len(data.rows_index_map) else int(i)
        bad = ", ".join(f"{label} = {format_number(values[i])}"
                        for label, values in checks if not values[i] > 0)
        warnings.append(f"Row {row}: {bad} is outside the log domain (must be > 0); "
                        f"point excluded from fit")
        excluded.append(row)
    return mask, warnings, excluded


def _too_few_in_domain(data: ExtractedData, model: str, requirement: str,
                       warnings: Sequence[str]) -> Failure:
    return Failure(
        KIND_DATA,
        f"Not enough points with {requirement} for {model} fit (need at least 2)",
        data.warnings + tuple(warnings),
    )


# ===========================================================================
# Fitters
# ===========================================================================

def fit_linear(data: ExtractedData, config: Optional[FitConfig] = None) -> FitOutcome:
    """Least-squares line y = m*x + c; several X columns go to fit_multilinear."""
    if data.is_multivariable:
        return fit_multilinear(data, config)

    x = data.x[0]
    line = linear_regression(x, data.y)
    if line is None:
        return _zero_variance(data)
    m, c = line
    return _regression_result(
        "linear",
        LineCoefficients(m, c),
        f"y = {format_number(m)}x + {format_number(c)}",
        data,
        m * x + c,
    )


def fit_multilinear(data: ExtractedData, config: Optional[FitConfig] = None) -> FitOutcome:
    """Intercept plus one slope per X column, solved from the normal equations."""
    n_params = len(data.x) + 1
    if data.n < n_params:
        return Failure(
            KIND_DATA,
            f"Not enough points for {n_params - 1}-variable linear regression "
            f"(need at least {n_params}, got {data.n})",
            data.warnings,
        )

    design = np.column_stack([np.ones(data.n), *data.x])
    beta = _normal_equations(design, data.y)
    if beta is None:
        return Failure(
            KIND_DEGENERATE,
            "Normal-equation matrix is singular (collinear X columns or too few independent points)",
            data.warnings,
        )

    terms = [format_number(beta[0])]
    terms += [f"{format_number(b)}*{key}" for b, key in zip(beta[1:], data.x_keys)]
    return _regression_result(
        "linear",
        tuple(float(b) for b in beta),
        "y = " + " + ".join(terms),
        data,
        design @ beta,
    )


def fit_polynomial(data: ExtractedData, config: Optional[FitConfig] = None) -> FitOutcome:
    """Polynomial of config.degree, coefficients in ascending powers."""
    degree = (config or FitConfig()).degree
    x = data.x[0]
    if data.n <= degree:
        return Failure(
            KIND_DATA,
            f"Not enough points for polynomial of degree {degree} "
            f"(need more than {degree}, got {data.n})",
            data.warnings,
        )

    design = np.vander(x, degree + 1, increasing=True)
    coeffs = _normal_equations(design, data.y)
    if coeffs is None:
        return Failure(KIND_DEGENERATE, "Polynomial normal-equation matrix is singular",
                       data.warnings)

    terms = [format_number(coeffs[0])]
    terms += [f"{format_number(c)}x^{p}" for p, c in enumerate(coeffs[1:], start=1)]
    return _regression_result(
        "polynomial",
        tuple(float(c) for c in coeffs),
        "y = " + " + ".join(terms),
        data,
        design @ coeffs,
        degree=degree,
    )


def fit_exponential(data: ExtractedData, config: Optional[FitConfig] = None) -> FitOutcome:
    """y = a*e^(b*x) via ln(y) against x, over points with Y > 0."""
    x, y = data.x[0], data.y
    mask, domain_warnings, excluded = _domain_filter(data, [("Y", y)])
    if np.count_nonzero(mask) < 2:
        return _too_few_in_domain(data, "exponential", "Y > 0", domain_warnings)

    line = linear_regression(x[mask], np.log(y[mask]))
    if line is None:
        return _zero_variance(data, domain_warnings)
    b, ln_a = line
    with np.errstate(over="ignore"):
        a = float(np.exp(ln_a))
        y_pred = a * np.exp(b * x)

    return _regression_result(
        "exponential",
        ScaleCoefficients(a, b),
        f"y = {format_number(a)} e^({format_number(b)}x)",
        data,
        y_pred,
        mask=mask,
        domain_warnings=domain_warnings,
        excluded_rows=excluded,
    )


def fit_powerlaw(data: ExtractedData, config: Optional[FitConfig] = None) -> FitOutcome:
    """y = a*x^b via ln(y) against ln(x), over points with X > 0 and Y > 0."""
    x, y = data.x[0], data.y
    mask, domain_warnings, excluded = _domain_filter(data, [("X", x), ("Y", y)])
    if np.count_nonzero(mask) < 2:
        return _too_few_in_domain(data, "power-law", "X > 0 and Y > 0", domain_warnings)

    line = linear_regression(np.log(x[mask]), np.log(y[mask]))
    if line is None:
        return _zero_variance(data, domain_warnings)
    b, ln_a = line
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        a = float(np.exp(ln_a))
        y_pred = a * np.power(x, b)

    return _regression_result(
        "powerlaw",
        ScaleCoefficients(a, b),
        f"y = {format_number(a)} x^({format_number(b)})",
        data,
        y_pred,
        mask=mask,
        domain_warnings=domain_warnings,
        excluded_rows=excluded,
    )


def log_label(base: str) -> str:
    """Display name of a log base: ``ln``, ``log_10`` or ``log_2``."""
    return "ln" if base == "ln" else f"log_{base[3:]}"


def fit_logarithmic(data: ExtractedData, config: Optional[FitConfig] = None) -> FitOutcome:
    """y = a*log(x) + b in config.log_base, over points with X > 0."""
    base = (config or FitConfig()).log_base
    log_fn = LOG_FUNCTIONS[base]
    x, y = data.x[0], data.y
    mask, domain_warnings, excluded = _domain_filter(data, [("X", x)])
    if np.count_nonzero(mask) < 2:
        return _too_few_in_domain(data, "logarithmic", "X > 0", domain_warnings)

    line = linear_regression(log_fn(x[mask]), y[mask])
    if line is None:
        return _zero_variance(data, domain_warnings)
    a, b = line
    with np.errstate(divide="ignore", invalid="ignore"):
        y_pred = a * log_fn(x) + b

    return _regression_result(
        "logarithmic",
        LogCoefficients(a, b, base),
        f"y = {format_number(a)} {log_label(base)}(x) + {format_number(b)}",
        data,
        y_pred,
        mask=mask,
        domain_warnings=domain_warnings,
        excluded_rows=excluded,
    )


def fit_interpolation(data: ExtractedData, config: Optional[FitConfig] = None) -> FitOutcome:
    """Point table sorted by X; ties keep input order."""
    x = data.x[0]
    order = np.argsort(x, kind="stable")
    points = tuple(Point(float(x[i]), float(data.y[i])) for i in order)
    return FitResult(
        model="interpolation",
        coefficients=points,
        equation=f"piecewise-linear through {len(points)} points",
        x=data.x,
        y=data.y,
        x_keys=data.x_keys,
        warnings=data.warnings,
    )


# ===========================================================================
# Router
# ===========================================================================

_FITTERS: dict[str, Callable[[ExtractedData, FitConfig], FitOutcome]] = {
    "linear": fit_linear,
    "polynomial": fit_polynomial,
    "exponential": fit_exponential,
    "powerlaw": fit_powerlaw,
    "logarithmic": fit_logarithmic,
    "interpolation": fit_interpolation,
}


def _resolve_config(config: Any) -> FitConfig:
    if isinstance(config, FitConfig):
        return config
    if config is not None and not isinstance(config, Mapping):
        raise ValueError(f"config must be a mapping, got {type(config).__name__}")
    return FitConfig.from_mapping(config)


def fit_model(data: Union[ExtractedData, Failure],
              config: Union[FitConfig, Mapping[str, Any], None] = None) -> FitOutcome:
    """
    Dispatch extracted data to the configured model.

    Parameters
    ----------
    data : ExtractedData or Failure
        Output of ``extract_data``; a Failure is passed straight through.
    config : FitConfig or mapping, optional
        ``{model, degree, logBase}``; defaults to a linear fit.

    Returns
    -------
    FitResult or Failure
    """
    if isinstance(data, Failure):
        return data

    try:
        cfg = _resolve_config(config)
    except ValueError as exc:
        return Failure(KIND_CONFIG, str(exc), data.warnings)

    model = cfg.model.strip().lower()
    fitter = _FITTERS.get(model)
    if fitter is None:
        return Failure(KIND_CONFIG, f"Unknown model '{model}'", data.warnings)

    if model != "linear" and data.is_multivariable:
        return Failure(
            KIND_CONFIG,
            f"Model '{model}' does not support multivariable analysis "
            f"({len(data.x)} X columns: {', '.join(data.x_keys)})",
            data.warnings,
        )

    if not data.x:
        return Failure(KIND_DATA, "No X columns detected", data.warnings)
    if data.n == 0:
        return Failure(KIND_DATA, "No data points to fit", data.warnings)
    if any(len(col) != data.n for col in data.x):
        return Failure(KIND_VALIDATION, "X-column length mismatch", data.warnings)

    logger.debug("Fitting %s model to %d points (%d X columns)", model, data.n, len(data.x))
    return fitter(data, cfg)


def run_model(rows: Sequence[Mapping[str, Any]], columns: Sequence[Any],
              config: Union[FitConfig, Mapping[str, Any], None] = None) -> FitOutcome:
    """Extract a table and fit it in one call."""
    return fit_model(extract_data(rows, columns), config)
