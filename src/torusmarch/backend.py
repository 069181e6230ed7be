from __future__ import annotations

import logging
from typing import Any, Literal

import numpy as np

try:
    import cupy as cp  # type: ignore
except ImportError:  # pragma: no cover
    cp = None

logger = logging.getLogger(__name__)

ArrayModule = Any
BackendName = Literal["auto", "numpy", "cupy"]
BACKEND_NAMES: tuple[str, ...] = ("auto", "numpy", "cupy")


def get_array_module(name: BackendName = "auto") -> ArrayModule:
    """Return numpy or cupy depending on availability and request.

    ``auto`` picks CuPy when it is importable and falls back to NumPy.
    Asking for ``cupy`` explicitly without it installed is an error.
    """
    if name not in BACKEND_NAMES:
        msg = f"Unknown array backend {name!r}, expected one of {BACKEND_NAMES}"
        raise ValueError(msg)

    if name == "cupy":
        if cp is None:
            msg = "CuPy backend requested but cupy is not installed"
            raise RuntimeError(msg)
        logger.debug("using cupy array backend")
        return cp

    if name == "auto" and cp is not None:
        logger.debug("using cupy array backend (auto)")
        return cp

    logger.debug("using numpy array backend")
    return np


def is_cupy(xp: ArrayModule) -> bool:
    """Return True if xp is the CuPy module."""
    return cp is not None and xp is cp


def to_numpy(xp: ArrayModule, a: Any) -> np.ndarray:
    """Convert xp array to NumPy for rendering and plotting."""
    if is_cupy(xp):
        return cp.asnumpy(a)  # type: ignore[union-attr]
    return np.asarray(a)
