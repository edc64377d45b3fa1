import numpy as np
import pandas as pd

from .config import get_config
from .partition import Partitioner, cluster_sizes
from .preprocessing import Scaler, select_numeric
from .profiles import cluster_profiles
from .reduction import get_reducer
from .selection import ClusterCountSelector


class ExploratoryClustering:
    """
    Exploratory clustering workflow for small numeric tables.

    scale -> choose k -> partition, then, when the silhouette is not
    adequate, project to 2-D with classical MDS and repeat the choice of k
    and the partition in the reduced space.
    """

    def __init__(
        self,
        df,
        columns=None,
        k_range=None,
        random_state=None,
        n_init=None,
        threshold=None,
        reducer=None,
        force_reduction=False,
        compare_reducers=False,
        verbose=True
    ):
        """
        Initialize the workflow

        Parameters:
        -----------
        df : pandas.DataFrame
            Table with continuous numeric features
        columns : list of str, optional
            Features to cluster on (every numeric column by default)
        k_range : iterable of int
            Candidate cluster counts
        random_state : int
            Seed for K-Means and UMAP
        reducer : str
            Preferred projection, 'mds' or 'umap'
        force_reduction : bool
            Project even when the original space is already adequate
        compare_reducers : bool
            Also run the other projection for comparison
        """
        cfg = get_config()
        self.df = df.copy()
        self.columns = columns
        self.k_range = cfg.k_range if k_range is None else k_range
        self.random_state = cfg.SEED if random_state is None else random_state
        self.n_init = cfg.N_INIT if n_init is None else n_init
        self.threshold = cfg.SILHOUETTE_THRESHOLD if threshold is None else threshold
        self.reducer = (cfg.REDUCER if reducer is None else reducer).lower()
        self.force_reduction = force_reduction
        self.compare_reducers = compare_reducers
        self.verbose = verbose

        self.numeric_df = None
        self.scaled_data = None
        self.scaler = None
        self.results = {}
        self.final_stage = None

    def _selector(self):
        return ClusterCountSelector(
            k_range=self.k_range,
            random_state=self.random_state,
            n_init=self.n_init,
            threshold=self.threshold,
            verbose=self.verbose
        )

    def prepare_data(self):
        """Extract numeric features and scale data"""
        if self.verbose:
            print("=" * 80)
            print("PREPARING DATA FOR CLUSTERING")
            print("=" * 80)

        self.numeric_df = select_numeric(self.df, self.columns, verbose=self.verbose)

        self.scaler = Scaler()
        self.scaled_data = self.scaler.fit_transform(self.numeric_df)

        if self.verbose:
            print("✓ Data scaled using StandardScaler")
            for col in self.scaler.constant_columns:
                print(f"  [warning] column '{col}' is constant and carries no information")

        return self.scaled_data

    def cluster_stage(self, name, X):
        """Choose k on X and partition it; stored under results[name]."""
        selection = self._selector().find_optimal_k(X)

        partitioner = Partitioner(
            selection['optimal_k'],
            random_state=self.random_state,
            n_init=self.n_init
        )
        labels = partitioner.fit_predict(X)

        self.results[name] = {
            'selection': selection,
            'labels': labels,
            'model': partitioner,
            'sizes': cluster_sizes(labels),
        }

        if self.verbose:
            print(f"\n✓ K-Means ({name}) completed with k={selection['optimal_k']}")
            print("\n  Cluster Distribution:")
            for cluster, count in self.results[name]['sizes'].items():
                print(f"    Cluster {cluster}: {count} samples ({count / len(labels) * 100:.1f}%)")

        return self.results[name]

    def reduce_stage(self, method):
        """Project the scaled data with `method`, then re-run the cluster stage."""
        if self.verbose:
            print("\n" + "=" * 80)
            print(f"APPLYING {method.upper()} (DIMENSIONALITY REDUCTION)")
            print("=" * 80)

        kwargs = {'random_state': self.random_state} if method == 'umap' else {}
        reducer = get_reducer(method, **kwargs)
        embedding = reducer.fit_transform(self.scaled_data)

        if self.verbose and method == 'mds':
            print(f"✓ Classical MDS goodness of fit: {reducer.goodness_of_fit_:.4f}")

        stage = self.cluster_stage(method, embedding.values)
        stage['embedding'] = embedding
        stage['reducer'] = reducer
        return stage

    def needs_reduction(self):
        return self.force_reduction or not self.results['original']['selection']['adequate']

    def choose_final_stage(self):
        """First adequate stage in run order, otherwise the best silhouette."""
        for name, stage in self.results.items():
            if stage['selection']['adequate']:
                return name
        return max(self.results, key=lambda name: self.results[name]['selection']['silhouette'])

    def run_pipeline(self):
        """Run the complete clustering workflow"""
        if self.verbose:
            print("\n" + "=" * 80)
            print(" " * 20 + "EXPLORATORY CLUSTERING STARTED")
            print("=" * 80 + "\n")

        # Step 1: Prepare data
        self.prepare_data()

        # Step 2: Choose k and partition in the original space
        self.cluster_stage('original', self.scaled_data.values)

        # Step 3: Project and repeat when separation is weak
        if self.needs_reduction():
            self.reduce_stage(self.reducer)
            if self.compare_reducers:
                other = 'umap' if self.reducer == 'mds' else 'mds'
                self.reduce_stage(other)

        self.final_stage = self.choose_final_stage()

        if self.verbose:
            self.print_summary()

        return self.results

    @property
    def labels(self):
        if self.final_stage is None:
            raise ValueError("Run the pipeline first")
        return self.results[self.final_stage]['labels']

    def labelled_data(self) -> pd.DataFrame:
        """Original features with the adopted cluster label appended."""
        df_with_clusters = self.numeric_df.copy()
        df_with_clusters['Cluster'] = self.labels
        return df_with_clusters

    def generate_cluster_profiles(self, stage=None):
        stage = self.final_stage if stage is None else stage
        return cluster_profiles(self.numeric_df, self.results[stage]['labels'])

    def summary(self) -> pd.DataFrame:
        rows = []
        for name, stage in self.results.items():
            selection = stage['selection']
            rows.append({
                'stage': name,
                'k': selection['optimal_k'],
                'silhouette': selection['silhouette'],
                'adequate': selection['adequate'],
                'final': name == self.final_stage,
            })
        return pd.DataFrame(rows)

    def print_summary(self):
        """Print comprehensive summary of results"""
        print("\n" + "=" * 80)
        print("EXPLORATORY CLUSTERING - SUMMARY")
        print("=" * 80)

        print(f"\n  Total samples: {self.numeric_df.shape[0]}")
        print(f"  Total features: {self.numeric_df.shape[1]}")

        print("\n  " + "-" * 60)
        print(f"  {'Space':<12} {'Clusters':<10} {'Silhouette':<12} {'Adequate':<10}")
        print("  " + "-" * 60)
        for _, row in self.summary().iterrows():
            marker = " *" if row['final'] else ""
            print(f"  {row['stage'].upper():<12} {row['k']:<10} {row['silhouette']:<12.4f} "
                  f"{'yes' if row['adequate'] else 'no':<10}{marker}")
        print("  " + "-" * 60)

        sizes = np.bincount(self.labels)[1:]
        print(f"\n✓ Adopted partition: {self.final_stage} (cluster sizes {sizes.tolist()})")
        print("=" * 80)
