"""
Two-dimensional projections used when clusters are not well separated
in the original feature space.
"""

from abc import ABC, abstractmethod

import numpy as np
import pandas as pd
import umap
from scipy.spatial.distance import pdist, squareform

from .config import get_config


class DimensionReducer(ABC):
    """Maps a dataset to a fixed number of coordinates per row"""

    name = None

    def __init__(self, n_components: int = 2):
        self.n_components = n_components
        self.embedding_ = None

    @abstractmethod
    def _embed(self, X: np.ndarray) -> np.ndarray:
        pass

    def fit_transform(self, X) -> pd.DataFrame:
        index = X.index if isinstance(X, pd.DataFrame) else None
        X = np.asarray(X, dtype=float)
        if X.ndim != 2:
            raise ValueError(f"Expected a 2-D table, got shape {X.shape}")

        embedding = self._embed(X)
        columns = [f"{self.name.upper()}{i + 1}" for i in range(self.n_components)]
        self.embedding_ = pd.DataFrame(embedding, index=index, columns=columns)
        return self.embedding_


class ClassicalMDS(DimensionReducer):
    """
    Classical (Torgerson) multidimensional scaling on Euclidean distances.

    The squared distance matrix is double-centred and the top eigenpairs give
    the coordinates. Deterministic for a given input: each axis is oriented
    so that its largest-magnitude coordinate is positive.
    """

    name = "mds"

    def __init__(self, n_components: int = 2):
        super().__init__(n_components)
        self.eigenvalues_ = None
        self.goodness_of_fit_ = None

    def _embed(self, X):
        n = X.shape[0]
        if n < 2:
            raise ValueError("Classical MDS needs at least 2 rows")

        distances = squareform(pdist(X, metric="euclidean"))
        centering = np.eye(n) - np.ones((n, n)) / n
        B = -0.5 * centering @ (distances ** 2) @ centering

        eigenvalues, eigenvectors = np.linalg.eigh(B)
        order = np.argsort(eigenvalues)[::-1]
        eigenvalues = eigenvalues[order]
        eigenvectors = eigenvectors[:, order]

        top = np.clip(eigenvalues[:self.n_components], 0.0, None)
        vectors = eigenvectors[:, :self.n_components]

        for j in range(vectors.shape[1]):
            if vectors[np.argmax(np.abs(vectors[:, j])), j] < 0:
                vectors[:, j] = -vectors[:, j]

        self.eigenvalues_ = eigenvalues
        positive = eigenvalues[eigenvalues > 0].sum()
        self.goodness_of_fit_ = float(top.sum() / positive) if positive > 0 else float("nan")

        coords = vectors * np.sqrt(top)
        if coords.shape[1] < self.n_components:
            coords = np.hstack([coords, np.zeros((n, self.n_components - coords.shape[1]))])
        return coords


class UMAPProjection(DimensionReducer):
    """
    Uniform manifold approximation and projection.

    Keeps local neighbourhoods, not global distances, so cluster counts found
    in this space are harder to justify than the MDS ones. Neighbourhood size
    stays at the library default unless passed through ``umap_kwargs``.
    """

    name = "umap"

    def __init__(self, n_components: int = 2, random_state=None, **umap_kwargs):
        super().__init__(n_components)
        cfg = get_config()
        self.random_state = cfg.SEED if random_state is None else random_state
        self.umap_kwargs = umap_kwargs
        self.model = None

    def _embed(self, X):
        self.model = umap.UMAP(
            n_components=self.n_components,
            random_state=self.random_state,
            **self.umap_kwargs
        )
        return self.model.fit_transform(X)


REDUCERS = {
    "mds": ClassicalMDS,
    "umap": UMAPProjection,
}


def get_reducer(method: str = "mds", **kwargs) -> DimensionReducer:
    key = str(method).strip().lower()
    if key not in REDUCERS:
        raise ValueError(f"Unknown reduction method '{method}'. Choose from {sorted(REDUCERS)}")
    return REDUCERS[key](**kwargs)
