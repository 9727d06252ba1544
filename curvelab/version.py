"""
Version information for CurveLab.

This is the single source of truth for version information.
"""

__version__ = '0.3.0'
__version_info__ = (0, 3, 0)


def get_version_string():
    """Return formatted version string."""
    return f"v{__version__}"
