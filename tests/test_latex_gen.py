"""Tests for LaTeX rendering of fitted equations."""

import numpy as np
import pytest

from curvelab.extraction import ExtractedData
from curvelab.fitting import FitResult, fit_model
from curvelab.latex_gen import LaTeXGenerator


def fit(x, y, **config):
    return fit_model(ExtractedData.from_arrays(x, y), config)


@pytest.fixture
def gen():
    return LaTeXGenerator()


def test_linear_exact_mode():
    result = fit([0, 1, 2, 3], [3, 5, 7, 9], model="linear")
    assert LaTeXGenerator(approx=False).generate(result) == "$$y = 2 x + 3$$"


def test_linear_approx_mode(gen):
    result = fit([0, 1, 2, 3], [3, 5, 7, 9], model="linear")
    latex = gen.generate(result)

    assert latex.startswith("$$y = ")
    assert latex.endswith("$$")
    assert "x" in latex


def test_multivariable_uses_column_names(gen):
    x1 = np.array([0, 1, 2, 3, 4], dtype=float)
    x2 = np.array([1, 0, 2, 1, 3], dtype=float)
    data = ExtractedData.from_arrays([x1, x2], 1 + 2 * x1 + 3 * x2, x_keys=("T", "P"))
    latex = gen.generate(fit_model(data, {"model": "linear"}))

    assert "T" in latex
    assert "P" in latex


def test_polynomial_has_powers(gen):
    x = np.arange(5, dtype=float)
    latex = gen.generate(fit(x, 1 + x ** 2, model="polynomial", degree=2))
    assert "x^{2}" in latex


def test_exponential(gen):
    x = np.arange(4, dtype=float)
    latex = gen.generate(fit(x, 2 * np.exp(0.5 * x), model="exponential"))
    assert "e^{" in latex


def test_powerlaw(gen):
    x = np.array([1.0, 2.0, 3.0])
    latex = gen.generate(fit(x, 3 * x ** 2, model="powerlaw"))
    assert "x^{" in latex


def test_logarithmic_base_ten(gen):
    x = np.array([1.0, 10.0, 100.0])
    latex = gen.generate(fit(x, 2 * np.log10(x) + 1, model="logarithmic", logBase="log10"))

    assert "\\log_{10}(x)" in latex
    assert latex.startswith("$$y = ")


def test_logarithmic_natural(gen):
    x = np.array([1.0, 2.0, 4.0])
    latex = gen.generate(fit(x, np.log(x), model="logarithmic", logBase="ln"))

    assert "\\log" in latex
    assert "\\log_{" not in latex


def test_interpolation_cases(gen):
    latex = gen.generate(fit([1.0, 2.0, 3.0], [10.0, 20.0, 30.0], model="interpolation"))

    assert "\\begin{cases}" in latex
    assert latex.count("x \\in") == 2


def test_long_interpolation_is_summarised(gen):
    x = np.arange(10, dtype=float)
    latex = gen.generate(fit(x, x ** 2, model="interpolation"))
    assert "piecewise-linear with 9 segments" in latex


def test_interpolation_single_point(gen):
    latex = gen.generate(fit([1.0], [1.0], model="interpolation"))
    assert "not enough points" in latex


def test_unknown_model_falls_back_to_equation(gen):
    result = FitResult(model="custom", coefficients=(), equation="y = f(x)",
                       x=(np.array([1.0]),), y=np.array([1.0]), x_keys=("X",))
    assert gen.generate(result) == "$$\\text{y = f(x)}$$"
