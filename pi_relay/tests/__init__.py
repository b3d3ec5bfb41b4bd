"""Tests for the Pi relay."""
