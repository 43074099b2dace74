"""Generator registry — shape generators keyed by type, injected into the engine.

Usage:
    registry = GeneratorRegistry()
    registry.register(PolygonGenerator())
    pipeline = InstancePipeline(registry)

There is no process-wide registry: each app or test builds its own, so
registrations never leak between them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from flowfill.engine.errors import UnknownGeneratorError
from flowfill.engine.model import Shape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParamDefinition:
    name: str
    type: str  # slider | range | number | select | checkbox
    label: str
    min: float | None = None
    max: float | None = None
    step: float | None = None
    unit: str | None = None
    description: str = ""
    options: tuple[str, ...] = ()


@runtime_checkable
class Generator(Protocol):
    """A pure shape generator: output depends only on (t, params, seed)."""

    type: str
    name: str
    description: str
    tags: tuple[str, ...]
    size_param: str

    def generate(self, t: float, params: dict[str, Any], seed: int) -> Shape: ...

    def default_params(self) -> dict[str, Any]: ...

    def param_definitions(self) -> list[ParamDefinition]: ...


class GeneratorRegistry:
    def __init__(self) -> None:
        self._generators: dict[str, Generator] = {}

    def register(self, generator: Generator) -> None:
        if generator.type in self._generators:
            raise ValueError(f"Duplicate generator type: {generator.type}")
        self._generators[generator.type] = generator
        logger.debug("Registered generator %s", generator.type)

    def get(self, generator_type: str) -> Generator:
        try:
            return self._generators[generator_type]
        except KeyError:
            raise UnknownGeneratorError(generator_type) from None

    def has(self, generator_type: str) -> bool:
        return generator_type in self._generators

    def all(self) -> list[Generator]:
        return [self._generators[k] for k in sorted(self._generators)]

    def types(self) -> list[str]:
        return sorted(self._generators)

    def default_params(self, generator_type: str) -> dict[str, Any]:
        return self.get(generator_type).default_params()

    def size_params(self) -> dict[str, str]:
        """Generator type → name of its size parameter."""
        return {k: g.size_param for k, g in self._generators.items()}

    @property
    def count(self) -> int:
        return len(self._generators)
