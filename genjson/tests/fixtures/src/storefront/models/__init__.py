"""Storefront data models."""
