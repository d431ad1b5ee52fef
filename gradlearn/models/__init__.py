"""Supervised models built on the optimisation contract."""

from .logistic_reg import LogisticRegressor
from .nnet import NeuralNet

__all__ = ["NeuralNet", "LogisticRegressor"]
