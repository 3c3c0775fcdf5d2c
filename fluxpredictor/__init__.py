"""
fluxpredictor: membrane-distillation flux prediction by linear regression.

Fits an intercept-including OLS model of permeate flux on six operating
parameters, dropping predictors that are linearly dependent.

Submodules:
    core: Data sources, validation, exceptions, QR kernels
    regression: Design matrices, collinearity pruning, OLS fit
    membrane: Predictor configuration, data loader, prediction engine
"""

__version__ = "0.1.0"

from fluxpredictor import regression
from fluxpredictor import membrane

__all__ = [
    "__version__",
    "regression",
    "membrane",
]
