import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def blobs():
    rng = np.random.default_rng(0)
    X1 = rng.normal(loc=0.0, scale=0.3, size=(30, 2))
    X2 = rng.normal(loc=5.0, scale=0.3, size=(30, 2))
    return pd.DataFrame(np.vstack([X1, X2]), columns=["x", "y"])


@pytest.fixture
def three_blobs():
    rng = np.random.default_rng(1)
    centers = [(0.0, 0.0, 0.0), (6.0, 0.0, 3.0), (0.0, 6.0, -3.0)]
    X = np.vstack([rng.normal(loc=c, scale=0.4, size=(25, 3)) for c in centers])
    return pd.DataFrame(X, columns=["a", "b", "c"])
