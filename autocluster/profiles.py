import numpy as np
import pandas as pd
from scipy import stats


def cluster_profiles(df: pd.DataFrame, labels, confidence: float = 0.95) -> pd.DataFrame:
    """
    Mean of every feature per cluster with a t-based confidence interval.

    Returns one row per (cluster, feature) with columns
    Cluster, Feature, mean, std, count, ci_low, ci_high.
    Single-row clusters get a NaN interval.
    """
    df_with_clusters = pd.DataFrame(df).copy()
    if len(labels) != len(df_with_clusters):
        raise ValueError(f"Got {len(labels)} labels for {len(df_with_clusters)} rows")
    df_with_clusters['Cluster'] = np.asarray(labels)

    long_df = df_with_clusters.melt(id_vars='Cluster', var_name='Feature', value_name='value')
    summary = (long_df
               .groupby(['Cluster', 'Feature'], sort=True)['value']
               .agg(['mean', 'std', 'count'])
               .reset_index())

    sem = summary['std'] / np.sqrt(summary['count'])
    dof = summary['count'] - 1
    t_crit = pd.Series(
        [stats.t.ppf((1 + confidence) / 2, d) if d > 0 else np.nan for d in dof],
        index=summary.index
    )
    summary['ci_low'] = summary['mean'] - t_crit * sem
    summary['ci_high'] = summary['mean'] + t_crit * sem

    # keep the original feature order instead of alphabetical
    order = {name: i for i, name in enumerate(df_with_clusters.columns.drop('Cluster'))}
    summary = summary.sort_values(['Cluster', 'Feature'], key=lambda s: s.map(order) if s.name == 'Feature' else s)
    return summary.reset_index(drop=True)


def profile_table(df: pd.DataFrame, labels) -> pd.DataFrame:
    """Wide view: one row per cluster, mean of each feature plus cluster size."""
    df_with_clusters = pd.DataFrame(df).copy()
    df_with_clusters['Cluster'] = np.asarray(labels)
    table = df_with_clusters.groupby('Cluster').mean()
    table['size'] = df_with_clusters.groupby('Cluster').size()
    return table
