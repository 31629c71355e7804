"""savecb - save the clipboard (image or text) to a file through a native save dialog."""

__version__ = "1.0.0"
