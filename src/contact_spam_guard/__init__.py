"""Contact form spam guard - classify and gate website contact submissions."""

__version__ = "0.1.0"
