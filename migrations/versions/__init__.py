"""Versioned migration scripts."""
