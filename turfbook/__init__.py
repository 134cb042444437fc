"""Turfbook reservation engine: schedule rules, availability and bookings."""
