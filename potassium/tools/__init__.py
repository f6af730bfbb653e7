"""Delivery and probing tools."""
