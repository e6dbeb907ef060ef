"""
workcalc - working-time end date calculator.
"""

__version__ = "0.1.0"
