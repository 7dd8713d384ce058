from .charsets import (
    CODE_A, CODE_B, CODE_C, FNC1, FNC2, FNC3, FNC4, SHIFT
)
from .code128 import Code128
from .shortest import (
    best_subset_for_data, shortest_encoding, split_numeric_runs
)
