"""Distinctive features: the feature model, bundles, and natural classes."""

from phonemodel.features.model import (
    CATEGORIES,
    NOT_APPLICABLE,
    Feature,
    FeatureBundle,
    FeatureModel,
)
from phonemodel.features.classes import feature_distance, feature_set

__all__ = [
    "CATEGORIES",
    "NOT_APPLICABLE",
    "Feature",
    "FeatureBundle",
    "FeatureModel",
    "feature_distance",
    "feature_set",
]
