"""
Serving — FastAPI application exposing ask and compare endpoints.
"""
