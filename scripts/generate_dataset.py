#!/usr/bin/env python
"""
Generate a synthetic hospital admissions dataset.

Output:
  - data/hospital_admissions.csv  -> default input of the report

Usage:
    python scripts/generate_dataset.py
    python scripts/generate_dataset.py --seed 123 --n-records 20000
"""
import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from losreport.config import GeneratorConfig, DATA_CONFIG
from losreport.generator.core import AdmissionDataGenerator
from losreport.data.validators import validate_dataset, print_validation_report, save_validation_report


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate synthetic hospital admissions")

    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--n-records", type=int, default=5000, help="Number of admissions (default: 5000)")
    parser.add_argument("--missing-rate", type=float, default=0.01, help="Share of missing bed grades")
    parser.add_argument("--output", type=str, default=None, help="Output CSV path")
    parser.add_argument("--no-validate", action="store_true", help="Skip validation")
    parser.add_argument("--report", type=str, default="reports/generation_report.md", help="Validation report path")

    return parser.parse_args()


def main():
    args = parse_args()

    print("=" * 60)
    print("ADMISSIONS DATA GENERATOR")
    print("=" * 60)

    config = GeneratorConfig(seed=args.seed, n_records=args.n_records, missing_bed_grade_rate=args.missing_rate)
    if args.output:
        config.output_path = args.output

    print(f"\nConfiguration:")
    print(f"  Seed: {config.seed}")
    print(f"  Records: {config.n_records}")
    print(f"  Missing bed grade rate: {config.missing_bed_grade_rate:.1%}")

    df = AdmissionDataGenerator(config).generate()

    output_path = Path(config.output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, sep=DATA_CONFIG.csv_separator, index=False)
    print(f"\nSaved {len(df)} rows to {output_path}")

    if not args.no_validate:
        report = validate_dataset(df)
        print()
        print_validation_report(report)
        save_validation_report(report, str(PROJECT_ROOT / args.report))


if __name__ == "__main__":
    main()
