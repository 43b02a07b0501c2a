"""
Predict App - KenyaPolitics Predict client session coordinator

Keeps a persisted auth token, the in-memory user and the rendered view
consistent with what the prediction-market backend reports.
"""

__version__ = "0.1.0"
__author__ = "KenyaPolitics Predict Team"
