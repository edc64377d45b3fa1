import numpy as np
from sklearn.cluster import KMeans

from .config import get_config


class Partitioner:
    """
    K-Means partitioning with labels numbered from 1.

    Each run restarts ``n_init`` times from k-means++ seeds and keeps the
    solution with the lowest within-cluster sum of squares.
    """

    def __init__(self, n_clusters, random_state=None, n_init=None, max_iter=None):
        if int(n_clusters) < 1:
            raise ValueError(f"n_clusters must be at least 1, got {n_clusters}")

        cfg = get_config()
        self.n_clusters = int(n_clusters)
        self.random_state = cfg.SEED if random_state is None else random_state
        self.n_init = cfg.N_INIT if n_init is None else n_init
        self.max_iter = cfg.MAX_ITER if max_iter is None else max_iter

        self.model = None
        self.labels_ = None
        self.cluster_centers_ = None
        self.inertia_ = None
        self.n_iter_ = None

    def fit(self, X):
        X = np.asarray(X, dtype=float)
        if self.n_clusters > X.shape[0]:
            raise ValueError(
                f"n_clusters={self.n_clusters} exceeds the number of rows ({X.shape[0]})"
            )

        self.model = KMeans(
            n_clusters=self.n_clusters,
            init="k-means++",
            n_init=self.n_init,
            max_iter=self.max_iter,
            random_state=self.random_state,
        )
        self.model.fit(X)

        self.labels_ = self.model.labels_ + 1
        self.cluster_centers_ = self.model.cluster_centers_
        self.inertia_ = float(self.model.inertia_)
        self.n_iter_ = int(self.model.n_iter_)
        return self

    def fit_predict(self, X) -> np.ndarray:
        return self.fit(X).labels_

    def predict(self, X) -> np.ndarray:
        if self.model is None:
            raise ValueError("Partitioner has not been fitted yet")
        return self.model.predict(np.asarray(X, dtype=float)) + 1


def cluster_sizes(labels):
    """Rows per cluster label, ordered by label."""
    unique, counts = np.unique(labels, return_counts=True)
    return {int(cluster): int(count) for cluster, count in zip(unique, counts)}
