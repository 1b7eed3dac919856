"""Shared helpers: configuration, logging, errors and address handling."""
