"""Pydantic schemas for routing summaries and snapshot input."""
