"""Utility helpers for the host layer."""
