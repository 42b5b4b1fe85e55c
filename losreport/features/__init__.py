from losreport.features.build_features import (
    FeatureParams,
    fit_feature_params,
    build_features,
    transform_record,
    get_feature_columns,
    prepare_model_data,
)

__all__ = [
    "FeatureParams",
    "fit_feature_params",
    "build_features",
    "transform_record",
    "get_feature_columns",
    "prepare_model_data",
]
