"""
Demo of X-means clustering.

This example shows how to:
1. Cluster the six-point two-blob set with K searched in [1, 3]
2. Let X-means pick K on larger synthetic blobs
3. Plot the result and the growth of K
"""

import argparse

import torch
import matplotlib.pyplot as plt

from xmeans import XMeans, plot_clusters_2d, plot_k_history


def generate_six_points():
    """Two obvious clusters, near (10, 10) and near (5, 5)."""
    return torch.tensor([
        [10.0, 10.0],
        [10.1, 10.1],
        [10.2, 10.2],
        [5.0, 5.0],
        [5.1, 5.1],
        [5.2, 5.2],
    ])


def generate_blobs(n_per_cluster=150, spread=0.4, seed=42):
    """Four isotropic Gaussian blobs at unequal spacing along a shallow band.

    Equal groups placed symmetrically (a square, say) give the first
    two-way split no BIC gain, so the layout is deliberately uneven.
    """
    generator = torch.Generator().manual_seed(seed)
    means = torch.tensor([
        [0.0, 0.0],
        [4.0, 1.0],
        [12.0, 2.0],
        [24.0, 0.0],
    ])

    X = torch.cat([
        mean + spread * torch.randn(n_per_cluster, 2, generator=generator)
        for mean in means
    ])
    labels = torch.arange(len(means)).repeat_interleave(n_per_cluster)
    return X, labels


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--seed', type=int, default=0)
    parser.add_argument('--max-clusters', type=int, default=10)
    parser.add_argument('--plot', action='store_true', help='Show matplotlib figures')
    args = parser.parse_args()

    print("=== Six points, K in [1, 3] ===")
    xmeans = XMeans(min_clusters=1, max_clusters=3, stall_policy='stop', random_state=args.seed)
    xmeans.fit(generate_six_points())
    print(f"Best number of clusters: {xmeans.n_clusters_}")
    print(f"Resulting cluster ids: {xmeans.labels_.tolist()}")
    xmeans.output_cluster_centers()

    print(f"\n=== Four blobs, K in [1, {args.max_clusters}] ===")
    X, _ = generate_blobs()
    model = XMeans(min_clusters=1, max_clusters=args.max_clusters,
                   stall_policy='stop', random_state=args.seed, verbose=1)
    model.fit(X)
    print(f"K per structure step: {model.k_history_}")
    print(f"Final BIC: {model.bic_:.3f}")
    model.output_cluster_centers()

    if args.plot:
        fig, axes = plt.subplots(1, 2, figsize=(13, 5))
        plot_clusters_2d(X, model.labels_, model.cluster_centers_, ax=axes[0],
                         title=f'X-means (K = {model.n_clusters_})')
        plot_k_history(model.k_history_, max_clusters=args.max_clusters, ax=axes[1])
        plt.tight_layout()
        plt.show()


if __name__ == '__main__':
    main()
