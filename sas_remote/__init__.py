"""Submit SAS programs to a remote workspace server and collect their output."""

__version__ = "0.1.0"
