"""
PDF Overlay Translator - replaces page text in place with translations.
"""
__version__ = "1.0.0"
