"""dirkill - find and delete directories like node_modules."""

__version__ = "0.1.0"
