"""
Model training and evaluation utilities for the Hospital Length-of-Stay Report.
"""
import pandas as pd
import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from scipy import stats
from sklearn.linear_model import LinearRegression
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

from losreport.config import MODEL_CONFIG, logger
from losreport.errors import InsufficientDataError, DegenerateInputError

INTERCEPT = "const"


@dataclass
class OLSModel:
    """Fitted ordinary least squares model with per-term inference."""
    feature_names: List[str]
    params: pd.Series
    std_errors: pd.Series
    t_values: pd.Series
    p_values: pd.Series
    n_obs: int
    df_resid: int
    r2: float
    estimator: Optional[LinearRegression] = field(default=None, repr=False)

    @property
    def intercept(self) -> float:
        return float(self.params[INTERCEPT])

    @property
    def coefficients(self) -> pd.Series:
        return self.params.drop(INTERCEPT)

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        X = X[self.feature_names].astype(float)
        return self.intercept + X.to_numpy() @ self.coefficients.to_numpy()

    def conf_int(self, z: Optional[float] = None) -> pd.DataFrame:
        """Normal-approximation interval: estimate +/- z * standard error."""
        z = MODEL_CONFIG.ci_z if z is None else z
        return pd.DataFrame({
            "ci_lower": self.params - z * self.std_errors,
            "ci_upper": self.params + z * self.std_errors,
        })

    def summary(self, z: Optional[float] = None) -> pd.DataFrame:
        table = pd.DataFrame({
            "coef": self.params,
            "std_err": self.std_errors,
            "t": self.t_values,
            "p_value": self.p_values,
        })
        return table.join(self.conf_int(z))


def _design_matrix(X: pd.DataFrame) -> np.ndarray:
    return np.column_stack([np.ones(len(X)), X.to_numpy(dtype=float)])


def train_model(X_train: pd.DataFrame, y_train: pd.Series) -> OLSModel:
    """
    Fit an OLS regression with intercept.

    Args:
        X_train: Training predictors.
        y_train: Training target (log stay midpoint).

    Returns:
        Fitted OLSModel.

    Raises:
        InsufficientDataError: If there are fewer rows than predictors + 1.
        DegenerateInputError: If the design matrix is rank deficient.
    """
    feature_names = list(X_train.columns)
    n_obs, n_features = len(X_train), len(feature_names)
    n_params = n_features + 1

    if n_obs < n_params:
        raise InsufficientDataError(
            f"OLS needs at least {n_params} rows for {n_features} predictors, got {n_obs}"
        )

    design = _design_matrix(X_train)
    if np.linalg.matrix_rank(design) < n_params:
        raise DegenerateInputError(
            f"Design matrix is singular: predictors {feature_names} are perfectly collinear"
        )

    y = np.asarray(y_train, dtype=float)
    estimator = LinearRegression()
    estimator.fit(X_train.astype(float), y)

    beta = np.concatenate([[estimator.intercept_], estimator.coef_])
    residuals = y - design @ beta
    df_resid = n_obs - n_params

    index = [INTERCEPT] + feature_names
    if df_resid > 0:
        sigma2 = float(residuals @ residuals) / df_resid
        cov = sigma2 * np.linalg.inv(design.T @ design)
        std_errors = np.sqrt(np.clip(np.diag(cov), 0, None))
        with np.errstate(divide="ignore", invalid="ignore"):
            t_values = beta / std_errors
        p_values = 2 * stats.t.sf(np.abs(t_values), df_resid)
    else:
        # Exactly determined system: no residual variance to estimate
        std_errors = np.full(n_params, np.nan)
        t_values = np.full(n_params, np.nan)
        p_values = np.full(n_params, np.nan)

    r2 = r2_score(y, design @ beta)
    logger.info(f"OLS fitted on {n_obs} rows, {n_features} predictors (train R²={r2:.4f})")

    return OLSModel(
        feature_names=feature_names,
        params=pd.Series(beta, index=index),
        std_errors=pd.Series(std_errors, index=index),
        t_values=pd.Series(t_values, index=index),
        p_values=pd.Series(p_values, index=index),
        n_obs=n_obs,
        df_resid=df_resid,
        r2=float(r2),
        estimator=estimator,
    )


@dataclass
class EvaluationResult:
    """Test-set metrics on the log-transformed target."""
    r2: float
    adj_r2: float
    mae: float
    mse: float
    rmse: float
    n: int
    p: int
    predictions: pd.Series
    residuals: pd.Series

    def as_dict(self) -> Dict[str, float]:
        return {
            "R2": self.r2,
            "Adjusted R2": self.adj_r2,
            "MAE": self.mae,
            "MSE": self.mse,
            "RMSE": self.rmse,
        }

    def metrics_table(self) -> pd.DataFrame:
        return pd.DataFrame({"value": pd.Series(self.as_dict())}).rename_axis("metric")


def adjusted_r2(r2: float, n: int, p: int) -> float:
    """1 - (1 - R²)(n - 1)/(n - p - 1); NaN when n - p - 1 <= 0."""
    if n - p - 1 <= 0:
        return float("nan")
    return 1 - (1 - r2) * (n - 1) / (n - p - 1)


def evaluate_model(model: OLSModel, X_test: pd.DataFrame, y_test: pd.Series) -> EvaluationResult:
    """
    Evaluate a fitted model on test data.

    Residuals are observed minus predicted, aligned on the test index. R² is
    1 - SS_res/SS_tot as computed, so a constant test target gives -inf
    (or NaN for a perfect fit) instead of being clamped to 0.
    """
    if len(X_test) == 0:
        raise InsufficientDataError("Cannot evaluate on an empty test set")

    y_true = pd.Series(np.asarray(y_test, dtype=float), index=X_test.index)
    predictions = pd.Series(model.predict(X_test), index=X_test.index, name="predicted")
    residuals = (y_true - predictions).rename("residual")

    n, p = len(y_true), len(model.feature_names)
    if n > 1:
        r2 = float(r2_score(y_true, predictions, force_finite=False))
    else:
        r2 = float("nan")
    mse = float(mean_squared_error(y_true, predictions))

    result = EvaluationResult(
        r2=r2,
        adj_r2=adjusted_r2(r2, n, p),
        mae=float(mean_absolute_error(y_true, predictions)),
        mse=mse,
        rmse=float(np.sqrt(mse)),
        n=n,
        p=p,
        predictions=predictions,
        residuals=residuals,
    )
    logger.info(f"Test metrics (log scale): R²={result.r2:.4f}, MAE={result.mae:.4f}, RMSE={result.rmse:.4f}")
    return result


def day_scale_metrics(result: EvaluationResult, y_test: pd.Series) -> Dict[str, float]:
    """
    MAE, MSE and RMSE in days, computed on exponentiated observations and predictions.

    Observations are bucket midpoints, so these are errors against midpoints
    rather than true stays.
    """
    observed = np.exp(np.asarray(y_test, dtype=float))
    predicted = np.exp(result.predictions.to_numpy())
    mse = float(mean_squared_error(observed, predicted))
    return {
        "MAE (days)": float(mean_absolute_error(observed, predicted)),
        "MSE (days²)": mse,
        "RMSE (days)": float(np.sqrt(mse)),
    }


def exponentiate_metrics(result: EvaluationResult) -> Dict[str, float]:
    """
    exp() of the log-scale error metrics.

    This is an approximation, not a day-scale metric: exp(mean|r|) is the
    typical multiplicative error factor, and exp(mean(x)) != mean(exp(x)).
    Use ``day_scale_metrics`` for errors in days.
    """
    return {
        "exp(MAE)": float(np.exp(result.mae)),
        "exp(MSE)": float(np.exp(result.mse)),
        "exp(RMSE)": float(np.exp(result.rmse)),
    }
