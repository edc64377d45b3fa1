"""Reference vehicle data for the clustering walkthrough."""

import pandas as pd
from plotnine.data import mpg

from .config import VEHICLE_FEATURES


def load_vehicles() -> pd.DataFrame:
    """Fuel economy of 234 cars from 1999 and 2008 (ggplot2's ``mpg``)."""
    df = pd.DataFrame(mpg).copy()
    return df.reset_index(drop=True)


def vehicle_features(df=None) -> pd.DataFrame:
    """Engine displacement, cylinders, city and highway mpg."""
    if df is None:
        df = load_vehicles()
    return df[VEHICLE_FEATURES].astype(float)
