"""Unit conversions used when normalizing upstream payloads.

Each conversion has an inverse. Values are returned unrounded; rounding to
whole display units happens in :mod:`tahoe_sno.normalization`.
"""
from __future__ import annotations

CM_PER_INCH_FACTOR = 0.393701
METERS_PER_FOOT = 0.3048
DAILY_SNOWFALL_TO_CM = 10.0


def cm_to_inches(value: float) -> float:
    return float(value) * CM_PER_INCH_FACTOR


def inches_to_cm(value: float) -> float:
    return float(value) / CM_PER_INCH_FACTOR


def celsius_to_fahrenheit(value: float) -> float:
    return (float(value) * 9 / 5) + 32


def fahrenheit_to_celsius(value: float) -> float:
    return (float(value) - 32) * 5 / 9


def feet_to_meters(value: float) -> float:
    return float(value) * METERS_PER_FOOT


def meters_to_feet(value: float) -> float:
    return float(value) / METERS_PER_FOOT


def daily_snowfall_to_cm(value: float) -> float:
    """Scale a daily ``snowfall_sum`` reading (millimetres) for display in cm."""
    return float(value) * DAILY_SNOWFALL_TO_CM


def cm_to_daily_snowfall(value: float) -> float:
    return float(value) / DAILY_SNOWFALL_TO_CM


def meters_to_cm(value: float) -> float:
    return float(value) * 100


def cm_to_meters(value: float) -> float:
    return float(value) / 100
