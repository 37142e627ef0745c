"""
Short-link service: accounts, link management, redirects and click analytics.
"""

__version__ = "1.0.0"
