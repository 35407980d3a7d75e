"""HTTP API for Energy Pros."""
