"""Pydantic schemas for the HTTP contract (requests, responses, token claims)."""
