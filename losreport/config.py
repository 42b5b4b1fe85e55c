"""
Configuration settings for the Hospital Length-of-Stay Report.
"""
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional
import logging
import os


# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.absolute()

logger = logging.getLogger("losreport")


@dataclass
class DataConfig:
    """Configuration for data paths and loading."""
    # Primary data paths (in order of preference)
    data_paths: List[str] = field(default_factory=lambda: [
        str(PROJECT_ROOT / "data" / "raw" / "hospital_admissions.csv"),
        str(PROJECT_ROOT / "data" / "hospital_admissions.csv"),
        str(PROJECT_ROOT / "hospital_admissions.csv"),
    ])
    csv_separator: str = ","
    encoding: str = "utf-8"

    # Raw CSV header
    admission_column: str = "Type_of_Admission"
    severity_column: str = "Illness_Severity"
    bed_grade_column: str = "Bed_Grade"
    visitors_column: str = "Patient_Visitors"
    rooms_column: str = "Available_Extra_Rooms_in_Hospital"
    stay_column: str = "Stay_Days"

    @property
    def required_columns(self) -> List[str]:
        return [
            self.admission_column,
            self.severity_column,
            self.bed_grade_column,
            self.visitors_column,
            self.rooms_column,
            self.stay_column,
        ]


@dataclass
class ModelConfig:
    """Configuration for model training."""
    target_column: str = "log_stay_midpoint"
    test_size: float = 0.2
    random_state: int = 68
    ci_z: float = 1.96

    # Trauma is the reference admission type
    feature_columns: List[str] = field(default_factory=lambda: [
        "illness_severity_code",
        "bed_grade",
        "urgent",
        "emergency",
        "patient_visitors",
        "available_rooms",
    ])


@dataclass
class ReportConfig:
    """Configuration for report tables and plots."""
    scatter_sample_size: int = 2000
    scatter_random_state: int = 11
    pair_sample_size: int = 1000
    pair_random_state: int = 50
    histogram_bins: int = 50
    output_path: str = str(PROJECT_ROOT / "reports" / "los_report.html")


@dataclass
class GeneratorConfig:
    """Configuration for synthetic admission records."""
    seed: int = 42
    n_records: int = 5000
    output_path: str = str(PROJECT_ROOT / "data" / "hospital_admissions.csv")
    missing_bed_grade_rate: float = 0.01

    admission_probs: List[float] = field(default_factory=lambda: [0.45, 0.35, 0.20])
    severity_probs: List[float] = field(default_factory=lambda: [0.27, 0.55, 0.18])
    bed_grade_probs: List[float] = field(default_factory=lambda: [0.08, 0.38, 0.34, 0.20])

    # Log-scale effects on length of stay
    base_log_stay: float = 2.6
    severity_effect: float = 0.12
    bed_grade_effect: float = -0.03
    emergency_effect: float = 0.05
    urgent_effect: float = 0.02
    visitor_effect: float = 0.18
    rooms_effect: float = -0.06
    noise_std: float = 0.45


# Global configuration instances
DATA_CONFIG = DataConfig()
MODEL_CONFIG = ModelConfig()
REPORT_CONFIG = ReportConfig()
GENERATOR_CONFIG = GeneratorConfig()


def get_available_data_path() -> Optional[str]:
    """Find the first available data file path."""
    for path in DATA_CONFIG.data_paths:
        if os.path.exists(path):
            return path
    return None
