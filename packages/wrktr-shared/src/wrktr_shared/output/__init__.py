"""User-facing and machine-readable output helpers."""
