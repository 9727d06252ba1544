"""
CurveLab
========

Extraction and regression engine for tabular (X, Y) data.

Modules:
- extraction: strict table -> numeric vectors
- linalg: Gaussian elimination shared by the normal-equation fitters
- fitting: linear, polynomial, exponential, power-law, logarithmic and
  interpolation models plus the model router
- report, latex_gen, sampling: output helpers for calling applications
- cli: command-line front end
"""

from .version import __version__, __version_info__, get_version_string

from .config import FitConfig
from .numeric import parse_number, format_number
from .extraction import Column, ExtractedData, Failure, extract_data
from .linalg import solve_linear_system
from .fitting import (
    FitResult,
    FitStats,
    LineCoefficients,
    ScaleCoefficients,
    LogCoefficients,
    Point,
    fit_model,
    run_model,
    linear_regression,
    r2_score,
    rmse,
)
from .report import build_report, interpolation_segments, report_filename
from .latex_gen import LaTeXGenerator
from .sampling import predict, sample_curve

__all__ = [
    '__version__',
    '__version_info__',
    'get_version_string',
    'FitConfig',
    'parse_number',
    'format_number',
    'Column',
    'ExtractedData',
    'Failure',
    'extract_data',
    'solve_linear_system',
    'FitResult',
    'FitStats',
    'LineCoefficients',
    'ScaleCoefficients',
    'LogCoefficients',
    'Point',
    'fit_model',
    'run_model',
    'linear_regression',
    'r2_score',
    'rmse',
    'build_report',
    'interpolation_segments',
    'report_filename',
    'LaTeXGenerator',
    'predict',
    'sample_curve',
]
