"""
Tick Scales
===========
Pure numeric code deciding where axis ticks fall.

Note: This package should be pure Python (decimal, datetime) and should NOT import PySide6.
"""
