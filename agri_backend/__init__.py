"""
Farm finance backend for the crop-advisory application.

Exposes the authenticated /farm-finance record endpoint (FastAPI) and a
client-side state container that wraps it.
"""

__version__ = "0.1.0"
