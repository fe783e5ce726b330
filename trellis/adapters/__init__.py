"""Adapters around the trellis core.

Adapter Organization:

- reporter/: Implementations of ReporterPort (stdout, logging)
"""
