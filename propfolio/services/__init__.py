"""
Application services module.
"""

from propfolio.services.export import proforma_to_csv
from propfolio.services.recalc import RecalcState, RecalculationSession

__all__ = ["RecalcState", "RecalculationSession", "proforma_to_csv"]
