import pandas as pd
import numpy as np

from losreport.models.train import OLSModel


def predict(model: OLSModel, X: pd.DataFrame) -> np.ndarray:
    """Predicted log stay midpoint for encoded rows; extra columns are ignored."""
    return model.predict(X)


def predict_stay_days(model: OLSModel, X: pd.DataFrame) -> pd.Series:
    """
    Predicted stay in days, exp() of the log-scale prediction.

    Exponentiating a log-scale mean gives a geometric-mean style estimate,
    which sits below the arithmetic mean stay for the same predictors.
    """
    return pd.Series(np.exp(predict(model, X)), index=X.index, name="predicted_stay_days")
