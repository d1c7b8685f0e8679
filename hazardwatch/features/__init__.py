"""
Features for HazardWatch.

Safe-zone catalog loading, location resolution and evacuation guidance.
"""
