"""Configuration, logging, errors and other shared building blocks."""
