"""Middleware tests."""
