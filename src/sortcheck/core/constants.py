"""
Core constants for the sortcheck modulus engine.

All published literals (substitute sort codes, override weight vectors,
position labels) are defined here.
Import from this module rather than hardcoding values.
"""

from pathlib import Path

__all__ = [
    # Widths & labels
    "SORT_CODE_LENGTH",
    "ACCOUNT_NUMBER_LENGTH",
    "WEIGHT_COUNT",
    "SORT_CODE_LABELS",
    "ACCOUNT_LABELS",
    # Arithmetic
    "EXCEPTION_1_BIAS",
    "EXCEPTION_14_RETRY_DIGITS",
    "FOREIGN_CURRENCY_LEADING_DIGITS",
    # Substitutions
    "EXCEPTION_8_SORT_CODE",
    "EXCEPTION_9_SORT_CODE",
    "EXCEPTION_2_WEIGHTS",
    "EXCEPTION_2_WEIGHTS_G9",
    "ZERO_SORT_CODE_WEIGHTS",
    "ZERO_AB_WEIGHTS",
    "EXCEPTION_10_AB_PREFIXES",
    "SKIP_IF_C_IN",
    # Data files
    "DATA_DIR",
    "DEFAULT_RULES_FILE",
    "DEFAULT_SUBSTITUTIONS_FILE",
]

# --- WIDTHS & POSITIONS ---
SORT_CODE_LENGTH = 6
ACCOUNT_NUMBER_LENGTH = 8
WEIGHT_COUNT = SORT_CODE_LENGTH + ACCOUNT_NUMBER_LENGTH  # u..z then a..h

SORT_CODE_LABELS = "uvwxyz"
ACCOUNT_LABELS = "abcdefgh"

# --- ARITHMETIC ---
EXCEPTION_1_BIAS = 27  # added to the total before summing
EXCEPTION_14_RETRY_DIGITS = frozenset({0, 1, 9})  # values of h that allow the shifted retry
FOREIGN_CURRENCY_LEADING_DIGITS = frozenset({4, 5, 6, 7, 8})  # exception 6, digit a

# --- SUBSTITUTIONS ---
EXCEPTION_8_SORT_CODE = "090126"
EXCEPTION_9_SORT_CODE = "309634"

# Exception 2 weight replacements (u..z, then a..h); comma form because of the 10
EXCEPTION_2_WEIGHTS = ("001253", "6,4,8,7,10,9,3,1")
EXCEPTION_2_WEIGHTS_G9 = ("000000", "0,0,8,7,10,9,3,1")

# Exceptions 7 and 10 zero u..b
ZERO_SORT_CODE_WEIGHTS = "000000"
ZERO_AB_WEIGHTS = "00"

EXCEPTION_10_AB_PREFIXES = frozenset({"09", "99"})
SKIP_IF_C_IN = frozenset({6, 9})  # exception 3

# --- DATA FILES ---
# Bundled copies of the published tables. Point the settings at newer
# releases of the files when VocaLink publishes them.
DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_RULES_FILE = DATA_DIR / "valacdos.txt"
DEFAULT_SUBSTITUTIONS_FILE = DATA_DIR / "scsubtab.txt"
