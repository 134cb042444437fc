"""Core utilities for the reservation engine."""
