import base64
import io

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

sns.set_style("whitegrid")


def plot_silhouette_curve(selection, title="Silhouette Score (Higher is Better)", show=False):
    """Average silhouette width per k, with the chosen k marked"""
    scores = pd.DataFrame(selection['scores'])
    optimal_k = selection['optimal_k']

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(scores['k'], scores['silhouette'], 'go-', linewidth=2, markersize=8)
    ax.axvline(x=optimal_k, color='r', linestyle='--', label=f'Optimal k={optimal_k}')
    ax.set_xlabel('Number of Clusters (k)', fontsize=11)
    ax.set_ylabel('Average Silhouette Width', fontsize=11)
    ax.set_title(title, fontsize=12, fontweight='bold')
    ax.set_xticks(scores['k'])
    ax.grid(True, alpha=0.3)
    ax.legend()

    plt.tight_layout()
    if show:
        plt.show()
    return fig


def plot_cluster_means(df: pd.DataFrame, labels, show=False):
    """Mean of each feature by cluster with 95% confidence intervals"""
    df_with_clusters = pd.DataFrame(df).copy()
    df_with_clusters['Cluster'] = np.asarray(labels)
    features = [c for c in df_with_clusters.columns if c != 'Cluster']

    n_features = len(features)
    n_cols = min(3, n_features)
    n_rows = (n_features + n_cols - 1) // n_cols

    fig, axes = plt.subplots(n_rows, n_cols, figsize=(6 * n_cols, 4 * n_rows), squeeze=False)
    axes = axes.flatten()

    for idx, column in enumerate(features):
        sns.pointplot(
            data=df_with_clusters, x='Cluster', y=column,
            errorbar=('ci', 95), linestyle='none', capsize=0.2,
            color='steelblue', ax=axes[idx]
        )
        axes[idx].set_xlabel('Cluster', fontsize=10)
        axes[idx].set_ylabel(f'Mean {column}', fontsize=10)
        axes[idx].set_title(f'{column} by Cluster', fontsize=11, fontweight='bold')
        axes[idx].grid(True, alpha=0.3, axis='y')

    # Hide unused subplots
    for idx in range(n_features, len(axes)):
        axes[idx].axis('off')

    plt.tight_layout()
    if show:
        plt.show()
    return fig


def plot_embedding(embedding: pd.DataFrame, labels, title=None, silhouette=None, show=False):
    """Scatter of 2-D coordinates coloured by cluster"""
    embedding = pd.DataFrame(embedding)
    x_col, y_col = embedding.columns[:2]
    plot_df = embedding.assign(Cluster=pd.Categorical(np.asarray(labels)))

    fig, ax = plt.subplots(figsize=(8, 6))
    sns.scatterplot(
        data=plot_df, x=x_col, y=y_col, hue='Cluster',
        palette='viridis', s=50, alpha=0.7, edgecolor='black', linewidth=0.5, ax=ax
    )
    if title is None:
        title = f'K-Means Clustering ({x_col[:-1]})'
    if silhouette is not None:
        title = f'{title}\nSilhouette: {silhouette:.3f}'
    ax.set_title(title, fontsize=12, fontweight='bold')
    ax.set_xlabel(x_col, fontsize=11)
    ax.set_ylabel(y_col, fontsize=11)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()
    return fig


def figure_to_base64(fig, close=True):
    """
    Convert a matplotlib figure to base64 string
    """
    buf = io.BytesIO()
    fig.savefig(buf, format="png", bbox_inches="tight")
    if close:
        plt.close(fig)
    buf.seek(0)
    return base64.b64encode(buf.read()).decode("utf-8")
