"""Receipt line-item reconstruction from text-detection fragments."""

__version__ = "0.1.0"
