"""Test suite for the trellis test engine.

Organized into three categories:

1. core/: Unit tests for the engine
   - Tester lifecycle ordering, Spy installation, Expectation matchers
   - Uses in-memory fakes for ports

2. adapters/: Tests for reporter implementations
   - Output formatting for stdout and logging reporters

3. fakes/: Port implementations for testing
   - In-memory ReporterPort and TestSuite implementations
"""
