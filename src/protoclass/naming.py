"""
Class-name classification.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable

ClassNamePredicate = Callable[[str], bool]

_QUALIFIED_NAME = re.compile(r"^[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*$")


def unqualified(name: str) -> str:
    """``THREE.Mesh`` -> ``Mesh``."""
    return name.rsplit(".", 1)[-1]


def is_qualified_name(text: str) -> bool:
    return bool(_QUALIFIED_NAME.match(text))


def make_class_name_predicate(deny_names: Iterable[str] = ()) -> ClassNamePredicate:
    """
    Build the ``is_class_name`` predicate: an uppercase first letter on the
    last dotted segment marks a class, unless the name is deny-listed (either
    the qualified or the bare form).
    """

    denied = frozenset(deny_names)

    def is_class_name(name: str) -> bool:
        if not is_qualified_name(name):
            return False
        local = unqualified(name)
        if name in denied or local in denied:
            return False
        return local[:1].isupper()

    return is_class_name
