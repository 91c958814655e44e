"""Sales order composition and settlement service for a textile trading business."""

__version__ = "1.0.0"
