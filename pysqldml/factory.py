"""
pysqldml: Generate dialect-specific data manipulation statements.

This module helps discover and register database dialects.
"""

import importlib
import importlib.resources
import logging
import re
import typing

from strong_typing.inspection import get_module_classes

from .base import BaseEngine

LOGGER = logging.getLogger("pysqldml")

_engines: dict[str, BaseEngine] = {}


def register_dialect(engine_name: str, engine_factory: BaseEngine) -> None:
    """
    Dynamically registers a new database engine dialect.

    :param engine_name: The dialect name such as `oracle` or `postgresql`.
    :param engine_factory: The engine factory to register, which creates generators.
    """

    if engine_name in _engines:
        raise ValueError(f"engine already registered: {engine_name}")

    _engines[engine_name] = engine_factory


def unregister_dialect(engine_name: str) -> None:
    """
    Dynamically removes a database engine dialect.

    :param engine_name: The dialect name such as `oracle` or `postgresql`.
    """

    _engines.pop(engine_name)


def get_dialect(engine_name: str) -> BaseEngine:
    "Looks up a database engine dialect based on its reference name."

    try:
        engine_factory = _engines[engine_name]
    except KeyError:
        raise ValueError(f"unrecognized dialect: {engine_name}")
    else:
        return engine_factory


def get_dialect_names() -> list[str]:
    "Names of all registered dialects."

    return sorted(_engines.keys())


def discover_dialects() -> None:
    "Discovers database engine dialects bundled with this package."

    resources = importlib.resources.files(__package__).joinpath("dialect").iterdir()
    for resource in resources:
        if resource.name.startswith((".", "__")) or not resource.is_dir():
            continue

        # import the module `engine`, which acts as an entry point to generator functionality
        module = importlib.import_module(
            f".dialect.{resource.name}.engine", package=__package__
        )
        classes = [
            cls
            for cls in get_module_classes(module)
            if re.match(r"^\w+Engine$", cls.__name__)
        ]
        engine_type = typing.cast(type[BaseEngine], classes.pop())
        engine_factory = engine_type()
        LOGGER.info(
            "found dialect `%s` defined by `%s`",
            engine_factory.name,
            engine_type.__name__,
        )
        register_dialect(engine_factory.name, engine_factory)


discover_dialects()
