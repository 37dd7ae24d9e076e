"""og-story: Open Graph metadata -> vertical story image."""

__version__ = "0.1.0"
