import dataclasses
import logging
from typing import Any, Dict, Mapping, Optional

from slugy.core import signals
from slugy.core.composers import ComposerRegistry, registry as default_registry
from slugy.core.specs import ComposedFields, FieldSpec, NestedPath, SingleField, parse_spec
from slugy.core.text import slugify
from slugy.settings import settings
from slugy.utils.formatting import stringify

logger = logging.getLogger(__name__)

_MISSING = object()


def read_field(record: Any, name: str) -> Any:
    """Read ``name`` from a mapping or an attribute-style record; ``None`` if absent."""
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


class MergedView:
    """Read-only view of a record with pending changes laid over it."""

    __slots__ = ("_record", "_changes")

    def __init__(self, record: Any, changes: Mapping[str, Any]) -> None:
        object.__setattr__(self, "_record", record)
        object.__setattr__(self, "_changes", changes)

    def __getattr__(self, name: str) -> Any:
        changes = object.__getattribute__(self, "_changes")
        if name in changes:
            return changes[name]
        return getattr(object.__getattribute__(self, "_record"), name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("MergedView is read-only")

    def __repr__(self) -> str:
        return f"MergedView({self._record!r}, {dict(self._changes)!r})"


def same_value(left: Any, right: Any) -> bool:
    try:
        return bool(left == right)
    except (TypeError, ValueError):
        # Array-like values without a single truth value compare as different.
        return False


def merged_view(record: Any, changes: Mapping[str, Any]) -> Any:
    """The prior record with ``changes`` laid over it, as seen by composers.

    Mappings merge into a new dict and dataclass instances are rebuilt with
    ``dataclasses.replace``, so both keep their type. Any other record (an ORM
    instance, say) is wrapped in a read-only :class:`MergedView`.
    """
    if record is None:
        return dict(changes)
    if isinstance(record, Mapping):
        return {**record, **changes}
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        fields = {field.name: field for field in dataclasses.fields(record)}
        overrides = {key: value for key, value in changes.items() if key in fields}
        if all(fields[key].init for key in overrides):
            return dataclasses.replace(record, **overrides)
    return MergedView(record, changes)


class ChangeAwareSlugAssigner:
    """Decides whether a change set warrants a new slug and, if so, computes it."""

    def __init__(
        self,
        composers: Optional[ComposerRegistry] = None,
        into: Optional[str] = None,
        table: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.composers = composers if composers is not None else default_registry
        self.into = into
        self.table = table

    def assign(
        self,
        changes: Mapping[str, Any],
        prior: Any,
        spec: Any,
        into: Optional[str] = None,
    ) -> Mapping[str, Any]:
        """Return ``changes`` plus a slug entry, or ``changes`` itself on a no-op.

        Watched values equal to the prior record's are not changes, so a
        change set that merely repeats the prior values adds no slug.
        """
        field_spec = parse_spec(spec)
        effective = self.drop_unchanged(changes, prior, field_spec)
        if effective is not changes and not self.is_triggered(effective, field_spec):
            logger.debug("Watched fields for %s repeat the prior values; slug untouched", field_spec)
            return changes
        return self.assign_changes(changes, prior, field_spec, into=into)

    def assign_changes(
        self,
        changes: Mapping[str, Any],
        prior: Any,
        spec: Any,
        into: Optional[str] = None,
    ) -> Mapping[str, Any]:
        """Like :meth:`assign`, for change sets already diffed against ``prior``.

        Every watched key present counts as changed.
        """
        field_spec = parse_spec(spec)
        target = into or self.into or settings.slug_field

        if not self.is_triggered(changes, field_spec):
            logger.debug("No watched field changed for %s; slug untouched", field_spec)
            return changes

        source = self.source_for(changes, prior, field_spec)
        if source is None:
            logger.debug("Slug source for %s resolved to nothing; slug untouched", field_spec)
            return changes

        slug = slugify(source, table=self.table)
        updated: Dict[str, Any] = dict(changes)
        updated[target] = slug
        logger.debug("Slug for %s recomputed as %r", field_spec, slug)
        signals.slug_assigned.send(sender=self, field=target, slug=slug, spec=field_spec)
        return updated

    def is_triggered(self, changes: Mapping[str, Any], spec: FieldSpec) -> bool:
        return any(name in changes for name in spec.watched)

    def drop_unchanged(self, changes: Mapping[str, Any], prior: Any, spec: FieldSpec) -> Mapping[str, Any]:
        if prior is None:
            return changes
        repeated = [
            name
            for name in spec.watched
            if name in changes and same_value(changes[name], read_field(prior, name))
        ]
        if not repeated:
            return changes
        return {key: value for key, value in changes.items() if key not in repeated}

    def source_for(self, changes: Mapping[str, Any], prior: Any, spec: FieldSpec) -> Optional[str]:
        if isinstance(spec, NestedPath):
            return self._resolve_nested(changes, spec.keys)

        composer = self.composers.get(type(prior)) if prior is not None else None
        if composer is not None:
            composed = composer(merged_view(prior, changes))
            return None if composed is None else stringify(composed)

        if isinstance(spec, SingleField):
            value = changes[spec.name]
            return None if value is None else stringify(value)

        if isinstance(spec, ComposedFields):
            return self._compose(changes, prior, spec.names)

        raise TypeError(f"Unhandled field spec {spec!r}")

    def _compose(self, changes: Mapping[str, Any], prior: Any, names) -> str:
        source = ""
        for name in names:
            value = changes[name] if name in changes else read_field(prior, name)
            source += stringify(value) + " "
        return source

    def _resolve_nested(self, changes: Mapping[str, Any], keys) -> Optional[str]:
        node: Any = changes
        for key in keys:
            if not isinstance(node, Mapping):
                return None
            node = node.get(key, _MISSING)
            if node is _MISSING or node is None:
                return None
        return stringify(node)


default_assigner = ChangeAwareSlugAssigner()


def assign(
    changes: Mapping[str, Any],
    prior: Any,
    spec: Any,
    into: Optional[str] = None,
) -> Mapping[str, Any]:
    return default_assigner.assign(changes, prior, spec, into=into)
