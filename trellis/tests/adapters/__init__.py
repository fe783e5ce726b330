"""Tests for reporter adapters."""
