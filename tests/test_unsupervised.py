import numpy as np
import pytest

from autocluster.datasets import load_vehicles, vehicle_features
from autocluster.preprocessing import standardize
from autocluster.reduction import ClassicalMDS
from autocluster.selection import ClusterCountSelector
from autocluster.unsupervised import ExploratoryClustering


@pytest.fixture(scope="module")
def scaled_vehicles():
    return standardize(vehicle_features())


def test_vehicle_table():
    df = load_vehicles()
    assert df.shape[0] == 234
    assert {"displ", "cyl", "cty", "hwy"} <= set(df.columns)


def test_vehicles_choose_two_clusters(scaled_vehicles):
    result = ClusterCountSelector(k_range=range(2, 10), random_state=42).find_optimal_k(scaled_vehicles)
    assert result["optimal_k"] == 2
    assert result["silhouette"] > 0.5
    assert result["adequate"] is True


def test_vehicles_choose_two_clusters_after_mds(scaled_vehicles):
    embedding = ClassicalMDS().fit_transform(scaled_vehicles)
    assert embedding.shape == (234, 2)
    result = ClusterCountSelector(k_range=range(2, 10), random_state=42).find_optimal_k(embedding)
    assert result["optimal_k"] == 2
    assert result["silhouette"] > 0.5


def test_pipeline_stops_when_original_space_is_adequate(blobs):
    pipeline = ExploratoryClustering(blobs, k_range=range(2, 6), verbose=False)
    results = pipeline.run_pipeline()
    assert list(results) == ["original"]
    assert pipeline.final_stage == "original"
    assert len(pipeline.labels) == len(blobs)
    assert set(pipeline.labels.tolist()) == {1, 2}


def test_pipeline_reduces_when_inadequate(three_blobs):
    pipeline = ExploratoryClustering(three_blobs, k_range=range(2, 6), threshold=0.99, verbose=False)
    results = pipeline.run_pipeline()
    assert list(results) == ["original", "mds"]
    assert results["mds"]["embedding"].shape == (len(three_blobs), 2)
    # nothing passes 0.99, so the best silhouette wins
    best = max(results, key=lambda s: results[s]["selection"]["silhouette"])
    assert pipeline.final_stage == best


def test_pipeline_compares_reducers(three_blobs):
    pipeline = ExploratoryClustering(
        three_blobs, k_range=range(2, 6), force_reduction=True, compare_reducers=True, verbose=False
    )
    pipeline.run_pipeline()
    assert list(pipeline.results) == ["original", "mds", "umap"]
    assert pipeline.final_stage == "original"

    summary = pipeline.summary()
    assert summary["stage"].tolist() == ["original", "mds", "umap"]
    assert summary["final"].sum() == 1


def test_pipeline_uses_requested_columns(three_blobs):
    df = three_blobs.assign(name="car")
    pipeline = ExploratoryClustering(df, columns=["a", "b"], k_range=range(2, 5), verbose=False)
    pipeline.run_pipeline()
    assert list(pipeline.numeric_df.columns) == ["a", "b"]
    labelled = pipeline.labelled_data()
    assert labelled["Cluster"].between(1, pipeline.results["original"]["selection"]["optimal_k"]).all()

    profiles = pipeline.generate_cluster_profiles()
    assert set(profiles["Feature"]) == {"a", "b"}


def test_pipeline_verbose_output(blobs, capsys):
    ExploratoryClustering(blobs, k_range=range(2, 4), verbose=True).run_pipeline()
    out = capsys.readouterr().out
    assert "PREPARING DATA FOR CLUSTERING" in out
    assert "EXPLORATORY CLUSTERING - SUMMARY" in out


def test_labels_before_run(blobs):
    with pytest.raises(ValueError, match="Run the pipeline"):
        ExploratoryClustering(blobs, verbose=False).labels


def test_vehicle_workflow_end_to_end():
    pipeline = ExploratoryClustering(
        load_vehicles(), columns=["displ", "cyl", "cty", "hwy"],
        k_range=range(2, 10), force_reduction=True, verbose=False
    )
    pipeline.run_pipeline()
    assert pipeline.results["original"]["selection"]["optimal_k"] == 2
    assert pipeline.results["mds"]["selection"]["optimal_k"] == 2
    assert pipeline.final_stage == "original"
    assert np.bincount(pipeline.labels)[1:].sum() == 234
