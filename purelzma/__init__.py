"""LZMA and LZMA2 stream coding in plain Python: readers, a raw LZMA encoder and their building blocks."""

__version__ = "0.1.0"