"""Primitive functions installed into the global environment."""
