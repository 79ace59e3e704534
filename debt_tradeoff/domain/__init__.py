"""Validation, strategy selection and the tradeoff model."""
