"""Data files shipped with the generator."""
