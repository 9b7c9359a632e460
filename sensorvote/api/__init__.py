"""
HTTP interface for SENSORVOTE.

Exposes the accuracy-weighted voter through a FastAPI application.
"""
