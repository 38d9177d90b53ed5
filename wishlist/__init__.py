"""Wishlist Resolver: product metadata resolution for wishlist links."""

__version__ = "1.0.0"
