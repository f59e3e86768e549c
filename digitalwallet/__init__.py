"""Digital wallet and account balance services with events, a unit of work and a WSGI router."""

__version__ = "0.1.0"