
import pandas as pd
import numpy as np
import pytest
from pathlib import Path
import sys

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from losreport import pipeline
from losreport.data.load import DataSource, DataNotFoundError
from losreport.errors import InvalidInputError, InsufficientDataError
from losreport.generator import generate_dataset
from losreport.pipeline import run_report, fit_and_evaluate
from losreport.config import MODEL_CONFIG

# Path to the dummy data created for tests
DUMMY_DATA_PATH = Path(__file__).parent / "data" / "dummy_admissions.csv"


@pytest.fixture(scope="module")
def synthetic_csv(tmp_path_factory):
    path = tmp_path_factory.mktemp("data") / "hospital_admissions.csv"
    df = generate_dataset(seed=11, n_records=2000)
    # Enough missing grades in both subsets to exercise imputation
    df.loc[df.index % 25 == 0, "Bed_Grade"] = np.nan
    df.to_csv(path, index=False)
    return path


def test_full_report_pipeline(synthetic_csv):
    """
    Tests the full pipeline from loading to evaluation on synthetic admissions.
    """
    result = run_report(synthetic_csv)

    assert len(result.train) == 1600
    assert len(result.test) == 400
    assert set(result.train.index).isdisjoint(result.test.index)

    assert result.model.feature_names == MODEL_CONFIG.feature_columns
    assert result.evaluation.n == 400
    assert result.evaluation.p == 6
    assert len(result.evaluation.residuals) == 400

    # The generator builds stay from these predictors, so the fit is informative
    assert result.evaluation.r2 > 0
    assert result.model.coefficients["illness_severity_code"] > 0


def test_imputation_constant_comes_from_training(synthetic_csv):
    result = run_report(synthetic_csv)

    raw = result.raw
    train_mean = raw.loc[result.train.index, "Bed_Grade"].mean()
    test_mean = raw.loc[result.test.index, "Bed_Grade"].mean()

    assert result.params.bed_grade_fill == pytest.approx(train_mean)
    assert result.params.bed_grade_fill != pytest.approx(test_mean)

    missing_in_test = raw.loc[result.test.index, "Bed_Grade"].isna()
    assert missing_in_test.any()
    filled = result.test.loc[missing_in_test[missing_in_test].index, "bed_grade"]
    assert (filled == result.params.bed_grade_fill).all()


def test_report_is_reproducible(synthetic_csv):
    first = run_report(synthetic_csv)
    second = run_report(synthetic_csv)

    assert first.test.index.tolist() == second.test.index.tolist()
    pd.testing.assert_series_equal(first.model.params, second.model.params)
    assert first.evaluation.rmse == second.evaluation.rmse


def test_too_few_rows_aborts(tmp_path):
    # 5 rows leave 4 training rows for six predictors and an intercept
    path = tmp_path / "tiny.csv"
    pd.read_csv(DUMMY_DATA_PATH).head(5).to_csv(path, index=False)

    with pytest.raises(InsufficientDataError):
        run_report(path)


def test_source_closed_after_failure(tmp_path, monkeypatch):
    df = pd.read_csv(DUMMY_DATA_PATH)
    df.loc[3, "Stay_Days"] = "100+"
    bad_path = tmp_path / "bad.csv"
    df.to_csv(bad_path, index=False)

    sources = []

    class RecordingSource(DataSource):
        def open(self):
            sources.append(self)
            return super().open()

    monkeypatch.setattr(pipeline, "DataSource", RecordingSource)

    with pytest.raises(InvalidInputError):
        run_report(bad_path)

    assert len(sources) == 1
    assert not sources[0].is_open


def test_missing_file_aborts():
    with pytest.raises(DataNotFoundError):
        run_report("does_not_exist.csv")


def test_fit_and_evaluate_uses_configured_seed():
    df = generate_dataset(seed=2, n_records=300)
    default = fit_and_evaluate(df)
    explicit = fit_and_evaluate(df, test_size=0.2, random_state=68)
    assert default.test.index.tolist() == explicit.test.index.tolist()
