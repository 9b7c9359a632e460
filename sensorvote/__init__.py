"""
SENSORVOTE - accuracy-weighted ensemble classification of sensor recordings.
"""

__version__ = "1.0.0"
