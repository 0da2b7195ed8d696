"""
FastAPI routers for all API endpoints.

Protected routers follow the same flow: auth dependency, parse/validate,
call service, map to ResponseModel.
"""
