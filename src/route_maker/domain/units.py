# domain/units.py
KM = 1000.0
MILE = 1609.344


def km(x: float) -> float:
    """meters -> kilometers"""
    return x / KM


def miles(x: float) -> float:
    """meters -> statute miles"""
    return x / MILE
