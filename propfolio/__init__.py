"""
Propfolio: real estate pro forma and investment calculators.
"""

__version__ = "0.1.0"
