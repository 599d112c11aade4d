"""
Utility functions
"""
from .datetime_utils import utc_today, to_iso_date

__all__ = ['utc_today', 'to_iso_date']
