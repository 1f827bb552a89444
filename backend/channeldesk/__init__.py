"""Channel Desk: manage metadata, comments and notes for your YouTube videos."""

__version__ = "1.0.0"
