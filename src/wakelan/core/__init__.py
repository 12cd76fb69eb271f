"""Validation, packet construction and transmission."""
