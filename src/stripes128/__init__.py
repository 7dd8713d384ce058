"""Code128 barcode encoder with automatic subset switching"""
from .encoding import (
    CODE_A, CODE_B, CODE_C, FNC1, FNC2, FNC3, FNC4, SHIFT, Code128,
    best_subset_for_data, shortest_encoding, split_numeric_runs
)

__version__ = "0.1.0"
