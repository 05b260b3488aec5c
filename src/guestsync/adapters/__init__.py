"""Vendor adapters implementing the domain ports."""
