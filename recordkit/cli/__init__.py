"""
recordkit CLI - Versioned record simulations

Commands:
- recordkit version - Version information
- recordkit simulate SCRIPT - Run a record script and show final versions and fired events
"""

from .. import __version__

__all__ = ["__version__"]
