"""Workflow defaults, overridable through environment variables."""

import os
from pathlib import Path


def _env_int(name, default):
    raw = os.getenv(name, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_float(name, default):
    raw = os.getenv(name, str(default)).strip()
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


# Vehicle features used by the reference workflow
VEHICLE_FEATURES = ["displ", "cyl", "cty", "hwy"]


class Config:
    def __init__(self):
        # Reproducibility
        self.SEED = _env_int("AUTOCLUSTER_SEED", 42)

        # Cluster count search
        self.K_MIN = _env_int("AUTOCLUSTER_K_MIN", 2)
        self.K_MAX = _env_int("AUTOCLUSTER_K_MAX", 10)
        self.SILHOUETTE_THRESHOLD = _env_float("AUTOCLUSTER_SILHOUETTE_THRESHOLD", 0.5)

        # K-Means
        self.N_INIT = _env_int("AUTOCLUSTER_N_INIT", 25)
        self.MAX_ITER = _env_int("AUTOCLUSTER_MAX_ITER", 300)

        # Dimensionality reduction
        self.REDUCER = os.getenv("AUTOCLUSTER_REDUCER", "mds").strip().lower()  # mds|umap

        # Plots
        self.OUTPUT_DIR = Path(os.getenv("AUTOCLUSTER_OUTPUT_DIR", "output"))

    @property
    def k_range(self):
        return range(self.K_MIN, self.K_MAX + 1)


class DevConfig(Config):
    VERBOSE = True


class ProdConfig(Config):
    VERBOSE = False


def get_config():
    """Re-read the environment and return the matching configuration."""
    env = os.getenv("APP_ENV", "dev").lower()
    return ProdConfig() if env == "prod" else DevConfig()
