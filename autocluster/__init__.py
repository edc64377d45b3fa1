"""Exploratory K-Means clustering with silhouette-based choice of k."""

from .config import get_config
from .datasets import load_vehicles, vehicle_features
from .partition import Partitioner, cluster_sizes
from .preprocessing import Scaler, read_file, select_numeric, standardize
from .profiles import cluster_profiles, profile_table
from .reduction import ClassicalMDS, DimensionReducer, UMAPProjection, get_reducer
from .selection import ClusterCountSelector, first_local_maximum
from .unsupervised import ExploratoryClustering

__all__ = [
    "get_config",
    "load_vehicles",
    "vehicle_features",
    "Partitioner",
    "cluster_sizes",
    "Scaler",
    "read_file",
    "select_numeric",
    "standardize",
    "cluster_profiles",
    "profile_table",
    "ClassicalMDS",
    "DimensionReducer",
    "UMAPProjection",
    "get_reducer",
    "ClusterCountSelector",
    "first_local_maximum",
    "ExploratoryClustering",
]
