"""Brevo contact and email abilities behind a validating gateway."""

__version__ = "1.0.0"
