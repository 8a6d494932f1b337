"""Errors raised while reading modelmerge configuration."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A configuration value is present but unusable."""


class MissingConfigurationError(ConfigurationError):
    """A required configuration value is absent or blank."""
