"""
Calendar units, arithmetic and rounding of `datetime` instants.
"""
