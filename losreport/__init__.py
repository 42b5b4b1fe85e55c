# Hospital Length-of-Stay Report - Source Package
"""
This package contains the core modules for the length-of-stay regression report:
- data: Data loading, validation and splitting
- features: Feature encoding shared by training and testing data
- models: OLS fitting and evaluation
- report: Exploratory tables, figures and report rendering
- generator: Synthetic admission records
"""

__version__ = "1.0.0"
