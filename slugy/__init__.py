from slugy.core.apps import setup
from slugy.core.assigner import ChangeAwareSlugAssigner, assign
from slugy.core.composers import (
    composer_for,
    get_composer,
    register_composer,
    unregister_composer,
)
from slugy.core.specs import ComposedFields, NestedPath, SingleField
from slugy.core.text import slugify

__all__ = [
    "ChangeAwareSlugAssigner",
    "ComposedFields",
    "NestedPath",
    "SingleField",
    "assign",
    "composer_for",
    "get_composer",
    "register_composer",
    "setup",
    "slugify",
    "unregister_composer",
]
