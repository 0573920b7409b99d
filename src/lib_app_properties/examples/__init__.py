"""Example scaffolding helpers for ``lib_app_properties``."""

from .generate import CATALINA_DIRECTORY, ExampleSpec, generate_examples

__all__ = [
    "CATALINA_DIRECTORY",
    "ExampleSpec",
    "generate_examples",
]
