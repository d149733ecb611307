"""Tests for content-bridge."""
