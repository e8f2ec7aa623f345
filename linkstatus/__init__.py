"""Web service that checks link availability and reports it as JSON or PDF."""

__version__ = "0.1.0"