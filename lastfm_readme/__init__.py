"""Keep Last.fm listening charts up to date inside README files."""

__version__ = "0.1.0"
