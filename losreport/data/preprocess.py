"""
Data preprocessing utilities for the Hospital Length-of-Stay Report.
"""
import pandas as pd
from typing import Tuple, Optional

from sklearn.model_selection import train_test_split

from losreport.config import MODEL_CONFIG, logger
from losreport.errors import InsufficientDataError


def get_train_test_split(
    df: pd.DataFrame,
    test_size: Optional[float] = None,
    random_state: Optional[int] = None
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Split rows at random into training and testing subsets.

    The same input and seed always give the same partition. Index labels are
    kept so that membership can be traced back to the full dataset.

    Args:
        df: DataFrame to split.
        test_size: Proportion of rows for testing. Defaults to config value.
        random_state: Random seed. Defaults to config value.

    Returns:
        Tuple of (train_df, test_df).
    """
    test_size = MODEL_CONFIG.test_size if test_size is None else test_size
    random_state = MODEL_CONFIG.random_state if random_state is None else random_state

    if not 0 < test_size < 1:
        raise ValueError(f"test_size must be between 0 and 1, got {test_size}")
    if len(df) < 2:
        raise InsufficientDataError(f"Cannot split {len(df)} rows into train and test sets")

    train_df, test_df = train_test_split(
        df, test_size=test_size, random_state=random_state, shuffle=True
    )

    logger.info(f"Split {len(df)} rows: {len(train_df)} train / {len(test_df)} test (seed={random_state})")
    return train_df.copy(), test_df.copy()
