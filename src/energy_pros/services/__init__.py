"""Business logic services for the Energy Pros application."""
