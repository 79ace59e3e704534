"""Pydantic contracts for engine output."""
