"""HTTP API for Quietline."""
