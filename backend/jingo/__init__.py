"""
Jingo Jump Commerce API

Storefront and back-office API for Jingo Jump commercial inflatables.
"""
__version__ = "1.0.0"
