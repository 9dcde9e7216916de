"""Utilities for the ncopt package, `math` for numerical helpers like the
power iteration eigensolver and `utils` for everything else.
"""
from . import math, utils
