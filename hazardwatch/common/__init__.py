"""
Common utilities for HazardWatch.

Geographic calculations and retry helpers shared across modules.
"""
