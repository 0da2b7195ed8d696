"""
Pydantic schemas for API request and response validation.

Endpoints validate bodies against these models and map store rows back
into them before responding.
"""
