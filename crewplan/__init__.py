"""Crew timeline and placement engine."""
