"""Errors raised while reading settings."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A setting is present but unusable, e.g. a negative severity credit."""


class MissingConfigurationError(ConfigurationError):
    """A required setting is unset or blank."""
