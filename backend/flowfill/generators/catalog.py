"""Built-in generator catalogue.

Adding a generator = one module with a generator class, listed here.
"""

from __future__ import annotations

import logging

from flowfill.engine.registry import Generator, GeneratorRegistry
from flowfill.generators.bird import BirdGenerator
from flowfill.generators.blob import BlobGenerator
from flowfill.generators.grass import GrassGenerator
from flowfill.generators.leaf import LeafGenerator
from flowfill.generators.polygon import PolygonGenerator

logger = logging.getLogger(__name__)

BUILTIN_GENERATORS: tuple[type[Generator], ...] = (
    PolygonGenerator,
    LeafGenerator,
    GrassGenerator,
    BirdGenerator,
    BlobGenerator,
)


def register_default_generators(registry: GeneratorRegistry) -> GeneratorRegistry:
    for cls in BUILTIN_GENERATORS:
        registry.register(cls())
    logger.info("Registered %d built-in generators", len(BUILTIN_GENERATORS))
    return registry


def create_default_registry() -> GeneratorRegistry:
    """A fresh registry holding every built-in generator."""
    return register_default_generators(GeneratorRegistry())
