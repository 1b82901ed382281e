"""In-memory library catalog and circulation tracker."""

__version__ = "0.1.0"
