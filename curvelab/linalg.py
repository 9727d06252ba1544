"""
Dense linear-system solver shared by the polynomial and multivariable fitters.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np
from numpy.typing import NDArray

from .config import SINGULAR_PIVOT_TOLERANCE

logger = logging.getLogger(__name__)

FloatArray = NDArray[np.float64]


def solve_linear_system(A: Any, b: Any,
                        tol: float = SINGULAR_PIVOT_TOLERANCE) -> Optional[FloatArray]:
    """Solve ``A @ s = b`` by Gauss-Jordan elimination with partial pivoting.

    Returns None when a pivot smaller than *tol* remains after row
    selection, i.e. the system is (numerically) singular.
    """
    A = np.asarray(A, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64).ravel()
    if A.ndim != 2 or A.shape[0] != A.shape[1] or b.shape[0] != A.shape[0]:
        raise ValueError(f"expected n x n matrix and n-vector, got {A.shape} and {b.shape}")

    n = A.shape[0]
    M = np.column_stack([A, b])

    for i in range(n):
        pivot_row = i + int(np.argmax(np.abs(M[i:, i])))
        if abs(M[pivot_row, i]) < tol:
            logger.debug("Singular system: pivot %.3e in column %d", M[pivot_row, i], i)
            return None
        if pivot_row != i:
            M[[i, pivot_row]] = M[[pivot_row, i]]

        M[i, i:] /= M[i, i]

        for r in range(n):
            if r == i:
                continue
            factor = M[r, i]
            if factor != 0.0:
                M[r, i:] -= factor * M[i, i:]

    return M[:, n].copy()
