"""Unit tests for the trellis core engine."""
