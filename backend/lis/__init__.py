"""LIS backend: counter-backed sequential identifiers for laboratory records."""
