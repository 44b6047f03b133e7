"""Slug assignment for SQLAlchemy ORM instances.

The change set is built from attribute history, so only attributes whose value
actually differs from the loaded state count as changed::

    class Post(Base):
        __tablename__ = "posts"
        id = mapped_column(Integer, primary_key=True)
        title = mapped_column(String)
        slug = mapped_column(String)

    slugify_on_flush(Post, "title")
"""
import logging
from typing import Any, Callable, Dict, Iterable, Optional

from sqlalchemy import event, inspect

from slugy.core.assigner import ChangeAwareSlugAssigner, default_assigner
from slugy.core.specs import parse_spec
from slugy.settings import settings

logger = logging.getLogger(__name__)


def changes_from_instance(instance: Any, fields: Iterable[str]) -> Dict[str, Any]:
    """Return ``{field: new value}`` for every field in ``fields`` with pending changes."""
    state = inspect(instance)
    changes: Dict[str, Any] = {}
    for name in fields:
        if name not in state.attrs:
            continue
        history = state.attrs[name].history
        if history.added:
            changes[name] = history.added[0]
    return changes


def assign_to_instance(
    instance: Any,
    spec: Any,
    into: Optional[str] = None,
    assigner: Optional[ChangeAwareSlugAssigner] = None,
) -> bool:
    """Compute the slug for ``instance`` and set it; returns whether a slug was written.

    The instance itself serves as the prior record: unchanged attributes still
    hold their loaded values. Attribute history already leaves out values equal
    to the loaded ones, so the change set is used as-is.
    """
    field_spec = parse_spec(spec)
    assigner = assigner or default_assigner
    target = into or assigner.into or settings.slug_field

    changes = changes_from_instance(instance, field_spec.watched)
    updated = assigner.assign_changes(changes, instance, field_spec, into=target)
    if updated is changes:
        return False

    setattr(instance, target, updated[target])
    return True


def slugify_on_flush(
    model_cls: type,
    spec: Any,
    into: Optional[str] = None,
    assigner: Optional[ChangeAwareSlugAssigner] = None,
) -> Callable:
    """Register mapper events that keep ``model_cls``'s slug in step with ``spec``.

    Returns the listener so callers can remove it with ``unregister``.
    """
    field_spec = parse_spec(spec)

    def listener(mapper, connection, target) -> None:
        if assign_to_instance(target, field_spec, into=into, assigner=assigner):
            logger.debug("Slug refreshed on %s before flush", model_cls.__name__)

    event.listen(model_cls, "before_insert", listener)
    event.listen(model_cls, "before_update", listener)
    return listener


def unregister(model_cls: type, listener: Callable) -> None:
    for identifier in ("before_insert", "before_update"):
        if event.contains(model_cls, identifier, listener):
            event.remove(model_cls, identifier, listener)
