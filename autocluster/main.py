import argparse
from pathlib import Path

import matplotlib.pyplot as plt

from .config import VEHICLE_FEATURES, get_config
from .datasets import load_vehicles
from .preprocessing import read_file
from .unsupervised import ExploratoryClustering
from .visualize import plot_cluster_means, plot_embedding, plot_silhouette_curve


def build_parser():
    cfg = get_config()
    parser = argparse.ArgumentParser(
        prog="autocluster",
        description="Choose a cluster count by silhouette width, partition with K-Means "
                    "and project to 2-D when clusters overlap.",
    )
    parser.add_argument("path", nargs="?", help="csv/tsv/xlsx/parquet file (bundled vehicle data if omitted)")
    parser.add_argument("--columns", nargs="+", help="feature columns to cluster on")
    parser.add_argument("--k-min", type=int, default=cfg.K_MIN)
    parser.add_argument("--k-max", type=int, default=cfg.K_MAX)
    parser.add_argument("--seed", type=int, default=cfg.SEED)
    parser.add_argument("--threshold", type=float, default=cfg.SILHOUETTE_THRESHOLD)
    parser.add_argument("--reducer", choices=["mds", "umap"], default=cfg.REDUCER)
    parser.add_argument("--force-reduction", action="store_true", help="project even if the original space is adequate")
    parser.add_argument("--compare", action="store_true", help="also run the other projection")
    parser.add_argument("--plots", type=Path, help="directory to write PNG plots to")
    parser.add_argument("--quiet", action="store_true")
    return parser


def save_plots(pipeline, output_dir):
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for name, stage in pipeline.results.items():
        figures = {
            f"silhouette_{name}.png": plot_silhouette_curve(stage['selection'], title=f"Silhouette ({name})"),
            f"cluster_means_{name}.png": plot_cluster_means(pipeline.numeric_df, stage['labels']),
        }
        if 'embedding' in stage:
            figures[f"embedding_{name}.png"] = plot_embedding(
                stage['embedding'], stage['labels'], silhouette=stage['selection']['silhouette']
            )
        for filename, fig in figures.items():
            fig.savefig(output_dir / filename, bbox_inches="tight")
            plt.close(fig)
            written.append(output_dir / filename)
    return written


def run(argv=None):
    args = build_parser().parse_args(argv)
    cfg = get_config()
    verbose = cfg.VERBOSE and not args.quiet

    if args.path:
        df = read_file(args.path)
        columns = args.columns
    else:
        df = load_vehicles()
        columns = args.columns or VEHICLE_FEATURES

    pipeline = ExploratoryClustering(
        df,
        columns=columns,
        k_range=range(args.k_min, args.k_max + 1),
        random_state=args.seed,
        threshold=args.threshold,
        reducer=args.reducer,
        force_reduction=args.force_reduction,
        compare_reducers=args.compare,
        verbose=verbose,
    )
    pipeline.run_pipeline()

    if not verbose:
        print(pipeline.summary().to_string(index=False))

    if args.plots:
        for path in save_plots(pipeline, args.plots):
            print(f"Plot written to: {path}")

    return pipeline


def main(argv=None):
    run(argv)
    return 0


if __name__ == "__main__":
    main()
