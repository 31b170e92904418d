"""NOTAM collections."""
