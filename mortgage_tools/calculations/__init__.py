"""
Mortgage Calculation Engine

Pure calculation modules for the mortgage, split-mortgage and sale calculators.
"""

from mortgage_tools.calculations import amortization, point_in_time, sale, split, validation

__all__ = ["amortization", "point_in_time", "sale", "split", "validation"]
