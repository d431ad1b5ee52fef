"""First-order optimisers and the contract they train against."""

from .base import OptimAlgorithm, Optimizable
from .grad_desc import GradientDesc, StochasticGD

__all__ = ["Optimizable", "OptimAlgorithm", "GradientDesc", "StochasticGD"]
