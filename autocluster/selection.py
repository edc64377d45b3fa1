"""
Cluster count selection
Average silhouette width over a range of k, choosing the first peak
"""

import numpy as np
from sklearn.metrics import silhouette_score

from .config import get_config
from .partition import Partitioner


def first_local_maximum(ks, scores):
    """
    Smallest k at which the silhouette curve reaches a local maximum.

    A point counts as a peak when it is higher than its left neighbour (or is
    the first point) and not lower than its right neighbour (or is the last
    point). NaN scores are ignored.
    """
    pairs = [(k, s) for k, s in zip(ks, scores) if not np.isnan(s)]
    if not pairs:
        raise ValueError("No valid silhouette scores to choose from")

    ks = [k for k, _ in pairs]
    scores = [s for _, s in pairs]
    last = len(scores) - 1

    for i in range(last + 1):
        if i > 0 and scores[i] <= scores[i - 1]:
            continue
        if i == last or scores[i] >= scores[i + 1]:
            return ks[i]

    # a strictly increasing curve peaks at its last point
    return ks[last]


class ClusterCountSelector:
    """Silhouette-based choice of the number of K-Means clusters"""

    def __init__(
        self,
        k_range=None,
        random_state=None,
        n_init=None,
        threshold=None,
        verbose: bool = False
    ):
        """
        Parameters:
        -----------
        k_range : iterable of int
            Candidate cluster counts, each at least 2
        random_state : int
            Seed shared by every K-Means run
        n_init : int
            K-Means restarts per k
        threshold : float
            Average silhouette above which the clustering is considered adequate
        verbose : bool
            Print the score table
        """
        cfg = get_config()
        k_range = cfg.k_range if k_range is None else k_range
        self.k_range = sorted(int(k) for k in k_range)
        if not self.k_range:
            raise ValueError("k_range is empty")
        if self.k_range[0] < 2:
            raise ValueError("Silhouette width needs at least 2 clusters; k_range must start at 2 or above")

        self.random_state = cfg.SEED if random_state is None else random_state
        self.n_init = cfg.N_INIT if n_init is None else n_init
        self.threshold = cfg.SILHOUETTE_THRESHOLD if threshold is None else threshold
        self.verbose = verbose

    def silhouette_curve(self, X):
        """Average silhouette width and inertia for every candidate k."""
        X = np.asarray(X, dtype=float)
        n_samples = X.shape[0]

        results = []
        for k in self.k_range:
            if k >= n_samples:
                if self.verbose:
                    print(f"{k:>3} | [skip] needs more than {k} rows")
                continue

            partitioner = Partitioner(k, random_state=self.random_state, n_init=self.n_init)
            labels = partitioner.fit_predict(X)

            if len(np.unique(labels)) < 2:
                silhouette = float("nan")
            else:
                silhouette = float(silhouette_score(X, labels))

            results.append({
                'k': k,
                'silhouette': silhouette,
                'inertia': partitioner.inertia_,
            })

            if self.verbose:
                print(f"{k:>3} | {silhouette:>11.4f} | {partitioner.inertia_:>12.2f}")

        return results

    def find_optimal_k(self, X):
        """
        Scan the k range and pick the first silhouette peak.

        Returns:
        --------
        dict
            - optimal_k: chosen cluster count
            - silhouette: average silhouette width at optimal_k
            - adequate: whether silhouette exceeds the threshold
            - scores: per-k silhouette and inertia
            - reason: short explanation of the choice
        """
        X = np.asarray(X, dtype=float)

        if self.verbose:
            print("\n" + "=" * 80)
            print(f"FINDING OPTIMAL NUMBER OF CLUSTERS (samples: {X.shape[0]})")
            print("=" * 80)
            print(f"K range: {self.k_range}")
            print("-" * 80)
            print(f"{'K':>3} | {'Silhouette':>11} | {'Inertia':>12}")
            print("-" * 80)

        scores = self.silhouette_curve(X)
        ks = [r['k'] for r in scores]
        values = [r['silhouette'] for r in scores]

        if not scores or all(np.isnan(v) for v in values):
            raise ValueError(
                "No candidate k produced at least two distinct clusters; "
                "the data may be constant or have too few distinct rows"
            )

        optimal_k = first_local_maximum(ks, values)
        silhouette = values[ks.index(optimal_k)]
        adequate = bool(silhouette > self.threshold)

        if adequate:
            reason = f"First silhouette peak at k={optimal_k} ({silhouette:.3f} > {self.threshold})"
        else:
            reason = (f"First silhouette peak at k={optimal_k} ({silhouette:.3f} <= {self.threshold}); "
                      "try dimensionality reduction before accepting this partition")

        if self.verbose:
            print("-" * 80)
            print(f"\n✓ Optimal number of clusters: {optimal_k}")
            print(f"  Silhouette Score: {silhouette:.4f}")
            print(f"  Adequate (> {self.threshold}): {'yes' if adequate else 'no'}")
            print("=" * 80)

        return {
            'optimal_k': optimal_k,
            'silhouette': silhouette,
            'adequate': adequate,
            'scores': scores,
            'reason': reason,
        }
