"""
End-to-end length-of-stay report: load, split, encode, fit, evaluate.
"""
import pandas as pd
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from losreport.config import MODEL_CONFIG, logger
from losreport.data.load import DataSource, load_data
from losreport.data.preprocess import get_train_test_split
from losreport.features.build_features import (
    FeatureParams, fit_feature_params, build_features, prepare_model_data
)
from losreport.models.train import OLSModel, EvaluationResult, train_model, evaluate_model


@dataclass
class ReportResult:
    raw: pd.DataFrame
    train: pd.DataFrame
    test: pd.DataFrame
    params: FeatureParams
    model: OLSModel
    evaluation: EvaluationResult
    y_test: pd.Series


def fit_and_evaluate(
    df: pd.DataFrame,
    test_size: Optional[float] = None,
    random_state: Optional[int] = None
) -> ReportResult:
    """
    Split, encode, fit and evaluate an already loaded admissions frame.

    The bed-grade fill value is fitted on the training subset and passed
    unchanged to the encoding of the testing subset.
    """
    train_raw, test_raw = get_train_test_split(df, test_size=test_size, random_state=random_state)

    params = fit_feature_params(train_raw)
    train_df = build_features(train_raw, params)
    X_train, y_train = prepare_model_data(train_df)
    model = train_model(X_train, y_train)

    test_df = build_features(test_raw, params)
    X_test, y_test = prepare_model_data(test_df)
    evaluation = evaluate_model(model, X_test, y_test)

    return ReportResult(
        raw=df,
        train=train_df,
        test=test_df,
        params=params,
        model=model,
        evaluation=evaluation,
        y_test=y_test,
    )


def run_report(source: Optional[Union[str, Path]] = None) -> ReportResult:
    """
    Run the whole report against a CSV file.

    The data source is held open for the run and closed on exit, including
    when a step fails. Any failure aborts the run.
    """
    with DataSource(source) as data_source:
        df = load_data(data_source)
        logger.info(f"Fitting {MODEL_CONFIG.target_column} on {MODEL_CONFIG.feature_columns}")
        return fit_and_evaluate(df)
