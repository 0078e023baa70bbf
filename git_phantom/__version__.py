"""Version information for git-phantom."""

__version__ = "0.1.0"
