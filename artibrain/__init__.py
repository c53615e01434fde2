"""
ArtiBrain CMS - content management and public reading for an AI blog.
"""

__version__ = "1.0.0"
