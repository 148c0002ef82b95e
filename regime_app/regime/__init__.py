"""Market regime classification"""

from .classifier import RegimeClassifier

__all__ = ["RegimeClassifier"]
