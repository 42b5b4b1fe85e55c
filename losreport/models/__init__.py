from losreport.models.train import (
    OLSModel,
    EvaluationResult,
    train_model,
    evaluate_model,
    day_scale_metrics,
    exponentiate_metrics,
)
from losreport.models.predict import predict, predict_stay_days

__all__ = [
    "OLSModel",
    "EvaluationResult",
    "train_model",
    "evaluate_model",
    "day_scale_metrics",
    "exponentiate_metrics",
    "predict",
    "predict_stay_days",
]
