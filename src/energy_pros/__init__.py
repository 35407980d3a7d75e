"""Energy Pros: invite-only professional community API."""

__version__ = "0.1.0"
