"""
Correlation structure between account returns.

Accounts held by one household usually ride the same market, so independent
draws per account understate how bad a bad year is. A single pairwise
correlation (equicorrelation) is enough for a household-level projection.
"""

from __future__ import annotations

import numpy as np


def _ensure_positive_definite(matrix: np.ndarray) -> np.ndarray:
    """
    Force a correlation matrix to be positive semi-definite.

    A strongly negative pairwise correlation across many accounts is not a
    valid correlation matrix; eigenvalue clipping repairs it.
    """
    eigenvalues, eigenvectors = np.linalg.eigh(matrix)
    eigenvalues = np.maximum(eigenvalues, 1e-8)
    fixed = eigenvectors @ np.diag(eigenvalues) @ eigenvectors.T
    d = np.sqrt(np.diag(fixed))
    fixed = fixed / np.outer(d, d)
    np.fill_diagonal(fixed, 1.0)
    return fixed


def equicorrelation_matrix(n: int, rho: float) -> np.ndarray:
    """n x n matrix with 1 on the diagonal and rho everywhere else."""
    rho = float(np.clip(rho, -1.0, 1.0))
    matrix = np.full((n, n), rho, dtype=float)
    np.fill_diagonal(matrix, 1.0)
    return matrix


def account_correlation_matrix(n_accounts: int, rho: float) -> np.ndarray:
    """Valid (repaired if needed) equicorrelation matrix for n_accounts."""
    return _ensure_positive_definite(equicorrelation_matrix(n_accounts, rho))

