"""Engine exception taxonomy."""

from __future__ import annotations


class FlowFillError(Exception):
    """Base class for placement engine errors."""


class ConfigurationError(FlowFillError, ValueError):
    """A flow path configuration cannot be placed (e.g. no generators)."""


class UnknownGeneratorError(ConfigurationError):
    """A generator type is not present in the registry."""

    def __init__(self, generator_type: str) -> None:
        super().__init__(f'Generator "{generator_type}" not found')
        self.generator_type = generator_type
