import numpy as np
import pandas as pd
import pytest

from autocluster.preprocessing import Scaler, read_file, select_numeric, standardize


def test_read_file_csv_and_tsv(tmp_path):
    df = pd.DataFrame({"a": [1.0, 2.0], "b": [3, 4]})
    csv = tmp_path / "data.csv"
    tsv = tmp_path / "data.tsv"
    df.to_csv(csv, index=False)
    df.to_csv(tsv, index=False, sep="\t")

    pd.testing.assert_frame_equal(read_file(str(csv)), df)
    pd.testing.assert_frame_equal(read_file(str(tsv)), df)


def test_read_file_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_file(str(tmp_path / "missing.csv"))

    other = tmp_path / "data.json"
    other.write_text("{}")
    with pytest.raises(ValueError, match="not supported"):
        read_file(str(other))


def test_select_numeric_drops_missing_rows():
    df = pd.DataFrame({
        "name": ["a", "b", "c"],
        "x": [1.0, np.nan, 3.0],
        "y": [4, 5, 6],
    })
    out = select_numeric(df)
    assert list(out.columns) == ["x", "y"]
    assert len(out) == 2
    assert out.dtypes.eq(float).all()


def test_select_numeric_rejects_bad_columns():
    df = pd.DataFrame({"name": ["a", "b"], "x": [1.0, 2.0]})
    with pytest.raises(ValueError, match="numeric"):
        select_numeric(df, ["name", "x"])
    with pytest.raises(ValueError, match="not found"):
        select_numeric(df, ["z"])
    with pytest.raises(ValueError, match="No numeric"):
        select_numeric(df[["name"]])


def test_standardize_moments(three_blobs):
    scaled = standardize(three_blobs * [1.0, 10.0, 100.0] + 3.0)
    np.testing.assert_allclose(scaled.mean().values, 0.0, atol=1e-10)
    np.testing.assert_allclose(scaled.std(ddof=0).values, 1.0, atol=1e-10)
    assert list(scaled.columns) == ["a", "b", "c"]
    assert scaled.index.equals(three_blobs.index)


def test_constant_column_scales_to_zero():
    df = pd.DataFrame({"x": [4.2] * 6})
    scaler = Scaler()
    scaled = scaler.fit_transform(df)
    assert np.isfinite(scaled["x"]).all()
    assert (scaled["x"] == 0).all()
    assert scaler.constant_columns == ["x"]


def test_scaler_transform_requires_fit():
    with pytest.raises(ValueError, match="fitted"):
        Scaler().transform(pd.DataFrame({"x": [1.0]}))


def test_scaler_transform_reuses_fit():
    train = pd.DataFrame({"x": [0.0, 2.0, 4.0]})
    scaler = Scaler()
    scaler.fit_transform(train)
    out = scaler.transform(pd.DataFrame({"x": [2.0]}))
    assert out["x"].iloc[0] == pytest.approx(0.0)
