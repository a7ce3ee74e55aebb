"""AI-assisted brand bible generator and branding chat."""

__version__ = "1.0.0"
