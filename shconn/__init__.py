"""shconn - pick a host from a YAML menu and connect via ssh, lftp or mount."""

__version__ = "1.0.0"
