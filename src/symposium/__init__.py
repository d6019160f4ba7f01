"""NJSRS symposium registration and signature workflow API."""

__version__ = "0.1.0"
