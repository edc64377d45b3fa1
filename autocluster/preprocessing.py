import os

import numpy as np
import pandas as pd
from sklearn.preprocessing import StandardScaler


# User supplies a table

def read_file(path):

    if os.path.exists(path) is True:
        file_name_ext = os.path.splitext(path)[1].lower()

        if file_name_ext == ".csv":
            df = pd.read_csv(path)

        elif file_name_ext in [".xlsx", ".xls"]:
            df = pd.read_excel(path)

        elif file_name_ext == ".parquet":
            df = pd.read_parquet(path)

        elif file_name_ext in [".txt", ".tsv"]:
            df = pd.read_csv(path, sep="\t")

        else:
            raise ValueError(f"File format of {file_name_ext} not supported. "
                             "Only csv, tsv, txt, xlsx, xls and parquet are supported")

    else:
        raise FileNotFoundError(f"Path incorrect, no such file {path}")

    return df


def select_numeric(df: pd.DataFrame, columns=None, verbose: bool = False) -> pd.DataFrame:
    """
    Keep the continuous feature columns and drop incomplete rows.

    Parameters:
    -----------
    df : pandas.DataFrame
        Raw table
    columns : list of str, optional
        Feature columns to keep. Every numeric column when omitted.
    verbose : bool
        Print what was kept and dropped
    """
    if columns is None:
        numeric_df = df.select_dtypes(include=[np.number])
    else:
        missing = [col for col in columns if col not in df.columns]
        if missing:
            raise ValueError(f"Columns not found in data: {missing}")

        non_numeric = [col for col in columns if not pd.api.types.is_numeric_dtype(df[col])]
        if non_numeric:
            raise ValueError(f"Columns must be numeric for clustering: {non_numeric}")

        numeric_df = df[list(columns)]

    if numeric_df.shape[1] == 0:
        raise ValueError("No numeric columns available for clustering")

    initial_rows = len(numeric_df)
    numeric_df = numeric_df.dropna()
    dropped = initial_rows - len(numeric_df)

    if verbose:
        print(f"\n✓ Selected {numeric_df.shape[1]} numeric features")
        print(f"  Features: {list(numeric_df.columns)}")
        if dropped > 0:
            print(f"✓ Removed {dropped} rows with missing values")
        print(f"✓ Dataset shape: {numeric_df.shape}")

    return numeric_df.astype(float)


class Scaler:
    """
    Column-wise z-score standardisation.

    Zero-variance columns are left at 0 after centring instead of
    becoming NaN.
    """

    def __init__(self):
        self.scaler = StandardScaler()
        self.feature_names = None

    def fit_transform(self, df) -> pd.DataFrame:
        df = pd.DataFrame(df)
        self.feature_names = df.columns.tolist()
        scaled = self.scaler.fit_transform(df.values)
        return pd.DataFrame(scaled, index=df.index, columns=self.feature_names)

    def transform(self, df) -> pd.DataFrame:
        if self.feature_names is None:
            raise ValueError("Scaler has not been fitted yet")
        df = pd.DataFrame(df)[self.feature_names]
        scaled = self.scaler.transform(df.values)
        return pd.DataFrame(scaled, index=df.index, columns=self.feature_names)

    @property
    def constant_columns(self):
        if self.feature_names is None:
            return []
        return [col for col, var in zip(self.feature_names, self.scaler.var_) if var == 0]


def standardize(df) -> pd.DataFrame:
    return Scaler().fit_transform(df)
