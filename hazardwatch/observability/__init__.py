"""
Observability for HazardWatch.

Logging, Prometheus metrics and HTTP endpoints.
"""
