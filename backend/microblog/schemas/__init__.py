"""Pydantic schemas for the microblog API."""
