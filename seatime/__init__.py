"""
Seatime interval engine: duration, overlap, validation and aggregation of
seafarers' sea-service periods.
"""

__version__ = "0.1.0"
