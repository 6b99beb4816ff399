"""
Importance reporting module: ranked tables and the clustered bar chart.
"""
import pandas as pd
import numpy as np
import logging
import matplotlib.pyplot as plt
import seaborn as sns
from pathlib import Path
from sklearn.cluster import KMeans
from typing import Optional, Tuple, Union

from xgb_insight import config

logger = logging.getLogger(__name__)


def cluster_importance(gains: np.ndarray, n_clusters: Optional[int] = None) -> np.ndarray:
    """
    Group gain values into clusters of similar importance.

    Runs a 1-D k-means over the gains. Clusters are renumbered so that
    cluster 1 holds the largest gains.

    Args:
        gains: Gain values.
        n_clusters: Upper bound on clusters. If None, uses config.IMPORTANCE_N_CLUSTERS.

    Returns:
        Integer array of cluster numbers (1-based), one per gain.
    """
    if n_clusters is None:
        n_clusters = config.IMPORTANCE_N_CLUSTERS

    gains = np.asarray(gains, dtype=float)
    n_clusters = min(n_clusters, len(np.unique(gains)))
    if n_clusters <= 1:
        return np.ones(len(gains), dtype=int)

    kmeans = KMeans(n_clusters=n_clusters, n_init=10, random_state=config.RANDOM_STATE)
    labels = kmeans.fit_predict(gains.reshape(-1, 1))

    order = np.argsort(-kmeans.cluster_centers_.ravel())
    rank = np.empty_like(order)
    rank[order] = np.arange(1, n_clusters + 1)

    return rank[labels]


def _display_labels(importance_df: pd.DataFrame) -> pd.Series:
    if 'split' in importance_df.columns:
        return importance_df['feature'] + " < " + importance_df['split'].map(lambda v: f"{v:g}")
    return importance_df['feature']


def plot_importance(
    importance_df: pd.DataFrame,
    top_n: Optional[int] = None,
    n_clusters: Optional[int] = None,
    title: str = "Feature Importance",
    figsize: Tuple[int, int] = (10, 6),
    save_path: Optional[Union[str, Path]] = None
) -> pd.DataFrame:
    """
    Plot feature importance as a bar chart coloured by gain cluster.

    Args:
        importance_df: Output of get_feature_importance or get_split_importance.
        top_n: Number of top rows to plot. If None, uses config.IMPORTANCE_TOP_N.
        n_clusters: Upper bound on gain clusters.
        title: Plot title.
        figsize: Figure size (width, height).
        save_path: If provided, save plot to this path.

    Returns:
        The plotted rows with 'label' and 'cluster' columns added.

    Raises:
        ValueError: If importance_df is empty.

    Example:
        >>> plot_importance(importance_df, save_path='importance.png')
    """
    if importance_df.empty:
        raise ValueError("Cannot plot an empty importance table")
    if top_n is None:
        top_n = config.IMPORTANCE_TOP_N

    plot_df = importance_df.head(top_n).copy()
    plot_df['label'] = _display_labels(plot_df)
    plot_df['cluster'] = cluster_importance(plot_df['gain'].to_numpy(), n_clusters)

    fig, ax = plt.subplots(figsize=figsize)

    sns.barplot(
        data=plot_df,
        x='gain',
        y='label',
        hue=plot_df['cluster'].astype(str),
        dodge=False,
        palette='Blues_r',
        ax=ax
    )
    ax.set_xlabel('Gain', fontsize=12)
    ax.set_ylabel('')
    ax.set_title(title, fontsize=14)
    ax.legend(title='Cluster')
    ax.grid(True, alpha=0.3, axis='x')

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Importance plot saved to: {save_path}")

    plt.close(fig)

    return plot_df


def format_importance_table(importance_df: pd.DataFrame, top_n: Optional[int] = None) -> str:
    """Render an importance table as aligned text, highest gain first."""
    if top_n is None:
        top_n = config.IMPORTANCE_TOP_N
    if importance_df.empty:
        return "(no splits)"

    return importance_df.head(top_n).to_string(
        index=False,
        float_format=lambda value: f"{value:.4f}"
    )
