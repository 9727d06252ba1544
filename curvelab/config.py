"""
Configuration constants and the fit configuration object.

Model names and log bases are the values a calling UI passes through
``{model, degree, logBase}``.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any, Mapping, Optional

# =============================================================================
# Numerics
# =============================================================================

SINGULAR_PIVOT_TOLERANCE: float = 1e-12
"""
Smallest pivot magnitude accepted by Gaussian elimination.

A pivot below this after partial pivoting marks the system as singular;
the solver returns ``None`` instead of dividing.
"""

# =============================================================================
# Model selection
# =============================================================================

MODEL_NAMES: tuple[str, ...] = (
    "linear",
    "polynomial",
    "exponential",
    "powerlaw",
    "logarithmic",
    "interpolation",
)

LOG_BASES: tuple[str, ...] = ("log10", "ln", "log2")

DEFAULT_MODEL: str = "linear"
DEFAULT_DEGREE: int = 2
DEFAULT_LOG_BASE: str = "log10"

# =============================================================================
# Output
# =============================================================================

DEFAULT_SAMPLE_COUNT: int = 300
"""Number of evenly spaced X samples used when drawing a fitted curve."""

FORMAT_PRECISION: int = 12
"""Significant digits used when numbers are written into reports."""

MAX_LATEX_SEGMENTS: int = 8
"""Interpolation tables longer than this are not expanded into LaTeX cases."""


@dataclass(frozen=True, slots=True)
class FitConfig:
    model: str = DEFAULT_MODEL
    degree: int = DEFAULT_DEGREE
    log_base: str = DEFAULT_LOG_BASE

    def __post_init__(self) -> None:
        if not isinstance(self.model, str):
            raise ValueError(f"model must be a string, got {self.model!r}")
        if isinstance(self.degree, bool) or not isinstance(self.degree, numbers.Integral):
            raise ValueError(f"degree must be an integer, got {self.degree!r}")
        object.__setattr__(self, "degree", int(self.degree))
        if self.degree < 1:
            raise ValueError(f"degree must be >= 1, got {self.degree}")
        if self.log_base not in LOG_BASES:
            raise ValueError(
                f"Unknown log base '{self.log_base}' (expected one of {', '.join(LOG_BASES)})"
            )

    @classmethod
    def from_mapping(cls, cfg: Optional[Mapping[str, Any]]) -> "FitConfig":
        """Build a config from a UI-style mapping; missing or None entries take defaults.

        Model and log-base names are matched case-insensitively after trimming.
        """
        if cfg is None:
            return cls()
        model = cfg.get("model")
        degree = cfg.get("degree")
        log_base = cfg.get("logBase", cfg.get("log_base"))
        return cls(
            model=DEFAULT_MODEL if model is None else str(model).strip().lower(),
            degree=DEFAULT_DEGREE if degree is None else degree,
            log_base=DEFAULT_LOG_BASE if log_base is None else str(log_base).strip().lower(),
        )


__all__ = [
    'SINGULAR_PIVOT_TOLERANCE',
    'MODEL_NAMES',
    'LOG_BASES',
    'DEFAULT_MODEL',
    'DEFAULT_DEGREE',
    'DEFAULT_LOG_BASE',
    'DEFAULT_SAMPLE_COUNT',
    'FORMAT_PRECISION',
    'MAX_LATEX_SEGMENTS',
    'FitConfig',
]
