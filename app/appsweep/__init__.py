"""appsweep - remove an application's leftover state from a Windows machine."""

__version__ = "0.3.0"
