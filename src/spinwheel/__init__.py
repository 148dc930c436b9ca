"""SPINWHEEL - seven-sector spinning wheel with text and image results."""

__version__ = "0.1.0"
