"""Layers package initialization."""
from petcatalog.layers.extraction import ExtractionLayer
from petcatalog.layers.reconciliation import OptionReconciler
from petcatalog.layers.confidence import ConfidenceScorer

__all__ = [
    "ExtractionLayer",
    "OptionReconciler",
    "ConfidenceScorer",
]
