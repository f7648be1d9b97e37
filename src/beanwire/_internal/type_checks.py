from __future__ import annotations

import types
from inspect import Parameter
from typing import Any, TypeGuard


def is_bean_type(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when ``candidate`` can key a bean lookup by type.

    ``list[int]`` style aliases and the ``Parameter.empty`` placeholder are
    classes at runtime but never name a bean type.
    """
    if candidate is Parameter.empty or isinstance(candidate, types.GenericAlias):
        return False
    return isinstance(candidate, type)
