"""App import resolution — resolves ``"module:attribute"`` strings to a Mount."""

import importlib
from typing import Any

from paperplane.app import Mount, mount


def load_object(import_string: str) -> Any:
    """Import the object named by ``"module:attribute"``.

    When the attribute portion is omitted, defaults to ``"app"``
    (``"myapp"`` resolves to ``myapp.app``).

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "app"

    module = importlib.import_module(module_path)
    return getattr(module, attr_name)


def as_mount(obj: Any, import_string: str) -> Mount:
    """A ``Mount`` is returned as-is; any other callable is mounted as a handler.

    Raises:
        TypeError: If *obj* is neither a Mount nor callable.
    """
    if isinstance(obj, Mount):
        return obj
    if callable(obj):
        return mount(obj)

    msg = f"{import_string!r} resolved to {type(obj).__name__}, not a Mount or handler"
    raise TypeError(msg)
