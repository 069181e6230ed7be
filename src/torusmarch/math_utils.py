from __future__ import annotations

from typing import Any

NORMALIZE_EPS: float = 1e-12


def normalize_batch(xp: Any, v: Any) -> Any:
    """Normalize (..., D) vectors; zero-length rows are left as they are."""
    n = xp.linalg.norm(v, axis=-1, keepdims=True)
    return xp.where(n > NORMALIZE_EPS, v / xp.maximum(n, NORMALIZE_EPS), v)


def matvec_batch(xp: Any, m: Any, v: Any) -> Any:
    """Apply a (3, 3) matrix to (..., 3) vectors."""
    return xp.einsum("ij,...j->...i", m, v)
