import pytest
import pandas as pd
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from losreport.data.schema import (
    AdmissionType, IllnessSeverity, StayBucket, parse_category, category_values
)
from losreport.data.validators import (
    validate_dataset, validate_bed_grade, validate_categories, save_validation_report
)
from losreport.errors import InvalidInputError


@pytest.fixture
def valid_df():
    return pd.DataFrame({
        "Type_of_Admission": ["Emergency", "Urgent", "Trauma"],
        "Illness_Severity": ["Minor", "Moderate", "Extreme"],
        "Bed_Grade": [1.0, np.nan, 4.0],
        "Patient_Visitors": [2, 3, 4],
        "Available_Extra_Rooms_in_Hospital": [1, 2, 3],
        "Stay_Days": ["0-10", "21-30", "More than 100 Days"],
    })


class TestSchema:
    def test_parse_category(self):
        assert parse_category(AdmissionType, "Urgent") is AdmissionType.URGENT
        assert parse_category(IllnessSeverity, " Extreme ") is IllnessSeverity.EXTREME

    def test_parse_category_rejects_unknown(self):
        with pytest.raises(InvalidInputError, match="Elective"):
            parse_category(AdmissionType, "Elective")

    def test_parse_category_is_case_sensitive(self):
        with pytest.raises(InvalidInputError):
            parse_category(IllnessSeverity, "minor")

    def test_eleven_stay_buckets(self):
        assert len(category_values(StayBucket)) == 11
        assert StayBucket.MORE_THAN_100.midpoint == 105

    def test_severity_codes_are_ordered(self):
        codes = [member.code for member in IllnessSeverity]
        assert codes == [1, 2, 3]


class TestValidation:
    def test_valid_dataset(self, valid_df):
        report = validate_dataset(valid_df)
        assert report.is_valid
        assert report.n_rows == 3
        # Missing bed grade is a warning only
        assert any(i.column == "Bed_Grade" and i.severity == "warning" for i in report.issues)

    def test_unknown_category(self, valid_df):
        valid_df.loc[1, "Type_of_Admission"] = "Elective"
        report = validate_dataset(valid_df)
        assert not report.is_valid
        assert report.errors[0].issue_type == "unknown_category"

    def test_missing_category_value(self, valid_df):
        valid_df.loc[0, "Stay_Days"] = np.nan
        issues = validate_categories(valid_df)
        assert any(i.issue_type == "missing_category" for i in issues)

    def test_bed_grade_out_of_range(self, valid_df):
        valid_df.loc[0, "Bed_Grade"] = 5
        issues = validate_bed_grade(valid_df)
        assert any(i.issue_type == "out_of_range" and i.severity == "error" for i in issues)

    def test_negative_count(self, valid_df):
        valid_df.loc[2, "Patient_Visitors"] = -1
        report = validate_dataset(valid_df)
        assert not report.is_valid
        assert any(i.issue_type == "negative_values" for i in report.errors)

    def test_fractional_count(self, valid_df):
        valid_df["Available_Extra_Rooms_in_Hospital"] = [1.0, 2.5, 3.0]
        report = validate_dataset(valid_df)
        assert not report.is_valid
        assert [i.issue_type for i in report.errors] == ["non_integer"]

    def test_missing_column(self, valid_df):
        report = validate_dataset(valid_df.drop(columns=["Stay_Days"]))
        assert not report.is_valid
        assert report.errors[0].issue_type == "missing_columns"

    def test_empty_dataset(self, valid_df):
        report = validate_dataset(valid_df.iloc[0:0])
        assert not report.is_valid

    def test_save_report(self, valid_df, tmp_path):
        path = tmp_path / "reports" / "validation.md"
        save_validation_report(validate_dataset(valid_df), str(path))
        content = path.read_text(encoding="utf-8")
        assert "**Status:** PASSED" in content
        assert "Bed_Grade" in content
