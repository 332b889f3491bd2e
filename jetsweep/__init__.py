"""
JetSweep - leave-by time planner for departing flights
"""

__version__ = "1.0.0"
