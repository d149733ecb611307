"""Content store tests."""
