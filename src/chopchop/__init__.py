"""chopchop: signature-driven scanner for exposed services, files and folders."""

__version__ = "1.0.0"
