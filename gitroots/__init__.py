"""gitroots — find git repositories and remember the projects you use."""

__version__ = "0.1.0"
