"""
tunnelkeeper - Bootstrap and supervise a tunnel binary on a managed host.

Downloads a release archive, extracts it, launches the tunnel binary with
settings from the environment and relays its output with the configuration
block redacted. A small web server keeps the host's port check satisfied.
"""

__version__ = "0.1.0"
