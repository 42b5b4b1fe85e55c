import pytest
import pandas as pd
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from losreport.models.train import (
    OLSModel,
    train_model,
    evaluate_model,
    adjusted_r2,
    day_scale_metrics,
    exponentiate_metrics,
)
from losreport.models.predict import predict, predict_stay_days
from losreport.errors import InsufficientDataError, DegenerateInputError


def exact_model(intercept=1.0, slope=2.0):
    index = ["const", "x"]
    return OLSModel(
        feature_names=["x"],
        params=pd.Series([intercept, slope], index=index),
        std_errors=pd.Series([0.1, 0.2], index=index),
        t_values=pd.Series([10.0, 10.0], index=index),
        p_values=pd.Series([0.0, 0.0], index=index),
        n_obs=5,
        df_resid=3,
        r2=1.0,
    )


class TestOLSFit:
    def test_exact_line_is_recovered(self):
        X = pd.DataFrame({"x": [1.0, 2.0, 3.0, 4.0, 5.0]})
        y = 2 * X["x"] + 1

        model = train_model(X, y)

        assert model.intercept == pytest.approx(1.0)
        assert model.coefficients["x"] == pytest.approx(2.0)
        assert model.r2 == pytest.approx(1.0)

        result = evaluate_model(model, X, y)
        assert result.r2 == pytest.approx(1.0)
        assert result.mae == pytest.approx(0.0, abs=1e-9)
        assert np.allclose(result.residuals, 0.0, atol=1e-9)

    def test_matches_closed_form_simple_regression(self):
        x = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        y = np.array([2.1, 3.9, 6.2, 7.8, 10.1])

        sxx = ((x - x.mean()) ** 2).sum()
        sxy = ((x - x.mean()) * (y - y.mean())).sum()
        slope = sxy / sxx
        intercept = y.mean() - slope * x.mean()
        residuals = y - (intercept + slope * x)
        sigma2 = (residuals ** 2).sum() / (len(x) - 2)
        se_slope = np.sqrt(sigma2 / sxx)
        se_intercept = np.sqrt(sigma2 * (1 / len(x) + x.mean() ** 2 / sxx))

        model = train_model(pd.DataFrame({"x": x}), pd.Series(y))

        assert model.coefficients["x"] == pytest.approx(slope)
        assert model.intercept == pytest.approx(intercept)
        assert model.std_errors["x"] == pytest.approx(se_slope)
        assert model.std_errors["const"] == pytest.approx(se_intercept)
        assert model.t_values["x"] == pytest.approx(slope / se_slope)
        assert model.df_resid == 3
        assert 0 <= model.p_values["x"] < 0.001

    def test_conf_int_is_normal_approximation(self):
        rng = np.random.default_rng(0)
        X = pd.DataFrame({"a": rng.normal(size=50), "b": rng.normal(size=50)})
        y = 0.5 + 1.5 * X["a"] - 0.7 * X["b"] + rng.normal(scale=0.3, size=50)

        model = train_model(X, y)
        ci = model.conf_int()

        assert np.allclose(ci["ci_lower"], model.params - 1.96 * model.std_errors)
        assert np.allclose(ci["ci_upper"], model.params + 1.96 * model.std_errors)

    def test_summary_table(self):
        rng = np.random.default_rng(1)
        X = pd.DataFrame({"a": rng.normal(size=30)})
        y = 2 * X["a"] + rng.normal(scale=0.5, size=30)

        summary = train_model(X, y).summary()

        assert summary.index.tolist() == ["const", "a"]
        assert summary.columns.tolist() == ["coef", "std_err", "t", "p_value", "ci_lower", "ci_upper"]
        assert (summary["ci_lower"] < summary["coef"]).all()
        assert (summary["coef"] < summary["ci_upper"]).all()

    def test_insufficient_rows(self):
        X = pd.DataFrame(np.arange(12, dtype=float).reshape(2, 6), columns=list("abcdef"))
        with pytest.raises(InsufficientDataError):
            train_model(X, pd.Series([1.0, 2.0]))

    def test_collinear_predictors(self):
        X = pd.DataFrame({"a": [1.0, 2.0, 3.0, 4.0, 5.0]})
        X["b"] = 2 * X["a"]
        with pytest.raises(DegenerateInputError):
            train_model(X, pd.Series([1.0, 2.0, 3.0, 5.0, 4.0]))

    def test_constant_predictor_is_degenerate(self):
        X = pd.DataFrame({"a": [1.0, 2.0, 3.0, 4.0, 5.0], "c": [3.0] * 5})
        with pytest.raises(DegenerateInputError):
            train_model(X, pd.Series([1.0, 2.0, 3.0, 5.0, 4.0]))

    def test_predict_uses_feature_order(self):
        X = pd.DataFrame({"a": [1.0, 2.0, 3.0, 4.0], "b": [0.0, 1.0, 0.0, 1.0]})
        y = 1 + 2 * X["a"] + 3 * X["b"]
        model = train_model(X, y)

        shuffled = X[["b", "a"]]
        assert np.allclose(predict(model, shuffled), y)
        assert np.allclose(predict_stay_days(model, X), np.exp(y))


class TestEvaluation:
    def test_perfect_predictions(self):
        X = pd.DataFrame({"x": [6.0, 7.0, 8.0, 9.0]})
        y = 1 + 2 * X["x"]

        result = evaluate_model(exact_model(), X, y)

        assert result.mae == 0
        assert result.mse == 0
        assert result.rmse == 0
        assert result.r2 == 1
        assert (result.residuals == 0).all()

    def test_metrics_by_hand(self):
        X = pd.DataFrame({"x": [0.0, 1.0, 2.0, 3.0]}, index=[10, 11, 12, 13])
        predicted = 1 + 2 * X["x"]
        y = predicted + pd.Series([0.5, -0.5, 1.0, -1.0], index=X.index)

        result = evaluate_model(exact_model(), X, y)

        ss_res = 0.25 + 0.25 + 1.0 + 1.0
        ss_tot = ((y - y.mean()) ** 2).sum()
        assert result.mae == pytest.approx(0.75)
        assert result.mse == pytest.approx(ss_res / 4)
        assert result.rmse == pytest.approx(np.sqrt(ss_res / 4))
        assert result.r2 == pytest.approx(1 - ss_res / ss_tot)
        assert result.adj_r2 == pytest.approx(1 - (1 - result.r2) * 3 / 2)

    def test_residuals_are_observed_minus_predicted(self):
        X = pd.DataFrame({"x": [0.0, 1.0, 2.0]}, index=["a", "b", "c"])
        y = pd.Series([2.0, 2.0, 6.0], index=["a", "b", "c"])

        result = evaluate_model(exact_model(), X, y)

        assert result.residuals.tolist() == [1.0, -1.0, 1.0]
        assert result.residuals.index.tolist() == ["a", "b", "c"]
        assert len(result.residuals) == len(X)

    def test_constant_target_r2_is_not_clamped(self):
        X = pd.DataFrame({"x": [1.0, 2.0]})
        y = pd.Series([4.0, 4.0])

        result = evaluate_model(exact_model(), X, y)

        # predictions 3 and 5: SS_res = 2, SS_tot = 0
        assert result.mse == pytest.approx(1.0)
        assert result.r2 == -np.inf

    def test_adjusted_r2(self):
        assert adjusted_r2(0.5, 10, 2) == pytest.approx(1 - 0.5 * 9 / 7)
        assert np.isnan(adjusted_r2(0.5, 3, 2))

    def test_metrics_table(self):
        X = pd.DataFrame({"x": [0.0, 1.0, 2.0]})
        result = evaluate_model(exact_model(), X, pd.Series([1.5, 3.0, 5.5]))
        table = result.metrics_table()
        assert table.index.tolist() == ["R2", "Adjusted R2", "MAE", "MSE", "RMSE"]

    def test_empty_test_set(self):
        with pytest.raises(InsufficientDataError):
            evaluate_model(exact_model(), pd.DataFrame({"x": []}), pd.Series([], dtype=float))


class TestDayScale:
    def test_day_scale_recomputes_on_exponentiated_values(self):
        X = pd.DataFrame({"x": [0.0, 0.5, 1.0]})
        observed = pd.Series(np.log([5.0, 15.0, 25.0]))
        result = evaluate_model(exact_model(intercept=np.log(10.0), slope=1.0), X, observed)

        predicted_days = np.exp(np.log(10.0) + X["x"].to_numpy())
        errors = np.array([5.0, 15.0, 25.0]) - predicted_days
        metrics = day_scale_metrics(result, observed)

        assert metrics["MAE (days)"] == pytest.approx(np.abs(errors).mean())
        assert metrics["MSE (days²)"] == pytest.approx((errors ** 2).mean())
        assert metrics["RMSE (days)"] == pytest.approx(np.sqrt((errors ** 2).mean()))

    def test_exponentiated_metrics_differ_from_day_scale(self):
        X = pd.DataFrame({"x": [0.0, 0.5, 1.0]})
        observed = pd.Series(np.log([5.0, 15.0, 25.0]))
        result = evaluate_model(exact_model(intercept=np.log(10.0), slope=1.0), X, observed)

        approx = exponentiate_metrics(result)
        exact = day_scale_metrics(result, observed)

        assert approx["exp(MAE)"] == pytest.approx(np.exp(result.mae))
        assert approx["exp(MAE)"] != pytest.approx(exact["MAE (days)"])
