"""Telemetry, settings, and the terminal read loop."""
