from dataclasses import dataclass
from typing import Any, Mapping, Tuple, Union

from slugy.core.exceptions import InvalidFieldSpec


@dataclass(frozen=True)
class SingleField:
    name: str

    @property
    def watched(self) -> Tuple[str, ...]:
        return (self.name,)


@dataclass(frozen=True)
class ComposedFields:
    """Several fields joined with spaces, in order (the ``with`` form)."""

    names: Tuple[str, ...]

    def __init__(self, names) -> None:
        if isinstance(names, str):
            raise InvalidFieldSpec("ComposedFields expects a list of field names, not a string")
        names = tuple(names)
        if not names:
            raise InvalidFieldSpec("ComposedFields needs at least one field name")
        object.__setattr__(self, "names", names)

    @property
    def watched(self) -> Tuple[str, ...]:
        return self.names


@dataclass(frozen=True)
class NestedPath:
    """A path of keys into a mapping-valued field, e.g. ``("data", "title")``."""

    keys: Tuple[Any, ...]

    def __init__(self, keys) -> None:
        if isinstance(keys, str):
            raise InvalidFieldSpec("NestedPath expects a sequence of keys, not a string")
        keys = tuple(keys)
        if not keys:
            raise InvalidFieldSpec("NestedPath needs at least one key")
        object.__setattr__(self, "keys", keys)

    @property
    def watched(self) -> Tuple[Any, ...]:
        return self.keys[:1]


FieldSpec = Union[SingleField, ComposedFields, NestedPath]


def parse_spec(spec: Any) -> FieldSpec:
    """Normalize the accepted spec shorthands.

    * ``"title"`` -> ``SingleField("title")``
    * ``["data", "title"]`` or a tuple -> ``NestedPath``
    * ``{"with": ["name", "type"]}`` -> ``ComposedFields``
    * spec instances are returned as-is
    """
    if isinstance(spec, (SingleField, ComposedFields, NestedPath)):
        return spec
    if isinstance(spec, str):
        return SingleField(spec)
    if isinstance(spec, Mapping):
        if set(spec) != {"with"}:
            raise InvalidFieldSpec(
                f"Mapping field specs take a single 'with' key, got {sorted(spec)}"
            )
        return ComposedFields(spec["with"])
    if isinstance(spec, (list, tuple)):
        return NestedPath(spec)
    raise InvalidFieldSpec(f"Unsupported field spec {spec!r}")
