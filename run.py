#!/usr/bin/env python
"""
Simple CLI to run the Hospital Length-of-Stay Report.

Usage:
    python run.py report                      # Run the report on the default CSV
    python run.py report data/admissions.csv  # Run the report on a given CSV
    python run.py app                         # Run Streamlit app
    python run.py generate                    # Generate synthetic admissions
    python run.py generate --seed 123         # Generate with custom seed
    python run.py validate                    # Validate the default CSV
    python run.py test                        # Run tests
    python run.py health                      # Run health check
"""
import logging
import sys
import subprocess
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent


def run_report(args):
    """Run the full report, print it and write the HTML document."""
    from losreport.errors import LosReportError
    from losreport.data.load import DataNotFoundError
    from losreport.pipeline import run_report as run_pipeline
    from losreport.report.render import print_report, save_html

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    source = args[0] if args else None
    try:
        result = run_pipeline(source)
    except (LosReportError, DataNotFoundError) as e:
        logging.getLogger("losreport").error(f"Report aborted: {e}")
        sys.exit(1)

    print_report(result)
    path = save_html(result, args[1] if len(args) > 1 else None)
    print(f"\nHTML report: {path}")


def run_app():
    """Run the Streamlit application."""
    try:
        print("Starting Streamlit app...")
        subprocess.run([
            sys.executable, "-m", "streamlit", "run",
            str(PROJECT_ROOT / "app" / "Home.py")
        ])
    except KeyboardInterrupt:
        return


def run_generate(args):
    """Generate synthetic data."""
    cmd = [sys.executable, str(PROJECT_ROOT / "scripts" / "generate_dataset.py")]
    cmd.extend(args)
    subprocess.run(cmd)


def run_validate(args):
    """Validate an admissions CSV."""
    cmd = [sys.executable, str(PROJECT_ROOT / "scripts" / "validate_data.py")]
    cmd.extend(args)
    subprocess.run(cmd)


def run_tests():
    """Run pytest tests."""
    print("Running tests...")
    subprocess.run([sys.executable, "-m", "pytest", "tests/", "-v"])


def run_health():
    """Run health check."""
    subprocess.run([sys.executable, str(PROJECT_ROOT / "scripts" / "health_check.py")])


def show_help():
    """Show help message."""
    print("""
Hospital Length-of-Stay Report - CLI

Commands:
    python run.py report [CSV] [HTML]    Run the report (console + HTML)
    python run.py app                    Run Streamlit application
    python run.py generate               Generate synthetic admissions (seed=42)
    python run.py generate --seed 123    Generate with custom seed
    python run.py validate [CSV]         Validate an admissions CSV
    python run.py test                   Run all tests
    python run.py health                 Run health check

Examples:
    python run.py generate --n-records 20000
    python run.py report
    python run.py report data/hospital_admissions.csv reports/los.html
    """)


def main():
    if len(sys.argv) < 2:
        show_help()
        return

    command = sys.argv[1].lower()
    extra_args = sys.argv[2:]

    if command in ["report", "run"]:
        run_report(extra_args)
    elif command in ["app", "start"]:
        run_app()
    elif command in ["generate", "gen", "data"]:
        run_generate(extra_args)
    elif command in ["validate", "check-data"]:
        run_validate(extra_args)
    elif command in ["test", "tests"]:
        run_tests()
    elif command in ["health", "check"]:
        run_health()
    elif command in ["help", "-h", "--help"]:
        show_help()
    else:
        print(f"Unknown command: {command}")
        show_help()


if __name__ == "__main__":
    main()
