"""Core synthetic admission record generation."""
import pandas as pd
import numpy as np
from typing import Optional

from losreport.config import DATA_CONFIG, GeneratorConfig, GENERATOR_CONFIG
from losreport.data.schema import (
    AdmissionType, IllnessSeverity, StayBucket, BED_GRADES, category_values
)


class AdmissionDataGenerator:
    """Generator for synthetic hospital admission records."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GENERATOR_CONFIG
        self.rng = np.random.default_rng(self.config.seed)

    def generate(self) -> pd.DataFrame:
        """Generate a complete synthetic dataset."""
        n = self.config.n_records

        df = pd.DataFrame(index=pd.RangeIndex(n))
        df = self._generate_categories(df, n)
        df = self._generate_counts(df, n)
        df = self._generate_stay(df, n)
        df = self._add_missing_bed_grades(df, n)
        return self._format_output(df)

    def _generate_categories(self, df: pd.DataFrame, n: int) -> pd.DataFrame:
        cfg = self.config
        df[DATA_CONFIG.admission_column] = self.rng.choice(category_values(AdmissionType), n, p=cfg.admission_probs)
        df[DATA_CONFIG.severity_column] = self.rng.choice(category_values(IllnessSeverity), n, p=cfg.severity_probs)
        df[DATA_CONFIG.bed_grade_column] = self.rng.choice(BED_GRADES, n, p=cfg.bed_grade_probs).astype(float)
        return df

    def _generate_counts(self, df: pd.DataFrame, n: int) -> pd.DataFrame:
        severity = df[DATA_CONFIG.severity_column].map({"Minor": 0, "Moderate": 1, "Extreme": 2}).values
        df[DATA_CONFIG.visitors_column] = np.clip(self.rng.poisson(2.5 + 0.6 * severity, n) + 1, 0, 32)
        df[DATA_CONFIG.rooms_column] = np.clip(self.rng.poisson(3.2, n), 0, 24)
        return df

    def _generate_stay(self, df: pd.DataFrame, n: int) -> pd.DataFrame:
        cfg = self.config
        severity = df[DATA_CONFIG.severity_column].map({"Minor": 1, "Moderate": 2, "Extreme": 3}).values
        admission = df[DATA_CONFIG.admission_column].values

        log_stay = (
            cfg.base_log_stay
            + cfg.severity_effect * severity
            + cfg.bed_grade_effect * df[DATA_CONFIG.bed_grade_column].values
            + cfg.emergency_effect * (admission == "Emergency")
            + cfg.urgent_effect * (admission == "Urgent")
            + cfg.visitor_effect * np.log1p(df[DATA_CONFIG.visitors_column].values)
            + cfg.rooms_effect * np.log1p(df[DATA_CONFIG.rooms_column].values)
            + self.rng.normal(0, cfg.noise_std, n)
        )
        days = np.exp(log_stay)
        df[DATA_CONFIG.stay_column] = [self._bucket(d) for d in days]
        return df

    @staticmethod
    def _bucket(days: float) -> str:
        if days > 100:
            return StayBucket.MORE_THAN_100.value
        upper = max(10, int(np.ceil(days / 10.0)) * 10)
        return "0-10" if upper == 10 else f"{upper - 9}-{upper}"

    def _add_missing_bed_grades(self, df: pd.DataFrame, n: int) -> pd.DataFrame:
        mask = self.rng.random(n) < self.config.missing_bed_grade_rate
        df.loc[mask, DATA_CONFIG.bed_grade_column] = np.nan
        return df

    def _format_output(self, df: pd.DataFrame) -> pd.DataFrame:
        return df[DATA_CONFIG.required_columns]


def generate_dataset(seed: int = 42, n_records: Optional[int] = None, output_path: Optional[str] = None) -> pd.DataFrame:
    config = GeneratorConfig(seed=seed)
    if n_records:
        config.n_records = n_records
    if output_path:
        config.output_path = output_path

    generator = AdmissionDataGenerator(config)
    return generator.generate()
