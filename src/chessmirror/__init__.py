"""chessmirror: mirror a live web chess board onto local rendering surfaces."""

__version__ = "0.1.0"
