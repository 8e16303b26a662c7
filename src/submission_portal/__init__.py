"""
Submission Portal - client-side submission lifecycle for the creative work portal.

This package provides the state container, filtering and the two-phase
upload-then-persist controller behind the portal's "My Work" page.
"""

__version__ = "1.0.0"
__author__ = "Development Team"
__email__ = "dev@example.com"
