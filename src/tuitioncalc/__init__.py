"""Tuition Calc - course schedule and tuition calculation engine."""

__version__ = "0.1.0"
