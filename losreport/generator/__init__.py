"""Synthetic admission record generator."""
from .core import AdmissionDataGenerator, generate_dataset

__all__ = ["AdmissionDataGenerator", "generate_dataset"]
