"""
Linear algebra kernels for fluxpredictor.

All functions follow these conventions:
    - NumPy/SciPy (LAPACK under the hood)
    - Each operation returns a structured result dataclass
    - Errors are raised immediately with clear messages

Submodules:
    qr: QR decomposition (plain and column-pivoted) and least squares solve
"""

from fluxpredictor.core.compute.linalg.qr import (
    QRResult,
    qr_decompose,
    qr_pivoted,
    qr_solve,
)

__all__ = [
    "QRResult",
    "qr_decompose",
    "qr_pivoted",
    "qr_solve",
]
