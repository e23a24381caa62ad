"""Household travel distance by density, income and mode from the 2017 NHTS."""

__version__ = "0.1.0"
