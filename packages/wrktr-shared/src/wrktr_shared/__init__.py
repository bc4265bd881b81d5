"""Shared gateways and helpers for wrktr."""
