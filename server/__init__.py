"""HTTP API for the test generator."""
