import logging
from typing import Any, Dict, Optional

import pandas as pd

from slugy.core.assigner import ChangeAwareSlugAssigner, default_assigner
from slugy.core.specs import parse_spec
from slugy.core.text import slugify
from slugy.settings import settings

logger = logging.getLogger(__name__)


def _is_missing(value: Any) -> bool:
    return pd.api.types.is_scalar(value) and pd.isna(value)


def _row_to_record(row: pd.Series) -> Dict[str, Any]:
    return {key: (None if _is_missing(value) else value) for key, value in row.items()}


def _as_objects(frame: pd.DataFrame) -> pd.DataFrame:
    return frame.convert_dtypes().astype(object)


def slugify_series(series: pd.Series) -> pd.Series:
    """Slugify every value of ``series``; missing values become empty slugs."""
    values = series.convert_dtypes().astype(object)
    return values.map(lambda value: slugify(None if _is_missing(value) else value))


def assign_frame(
    prior: Optional[pd.DataFrame],
    changes: pd.DataFrame,
    spec: Any,
    into: Optional[str] = None,
    record_type: Optional[type] = None,
    assigner: Optional[ChangeAwareSlugAssigner] = None,
) -> pd.DataFrame:
    """Run the slug assigner row by row over a frame of changes.

    ``changes`` and ``prior`` are aligned by index. A missing cell in
    ``changes`` means that field did not change; rows absent from ``prior``
    have no prior record. When ``record_type`` is given each prior row is built
    as ``record_type(**row)`` so composers registered for that type apply.

    Returns a copy of ``changes`` with an ``into`` column holding the new slug,
    or ``None`` where the row needed no slug.
    """
    field_spec = parse_spec(spec)
    assigner = assigner or default_assigner
    target = into or assigner.into or settings.slug_field

    # Missing cells turn int columns into float64; nullable dtypes cast to
    # object give back plain ints (2024, not 2024.0).
    changed_rows = _as_objects(changes)
    prior_rows = _as_objects(prior) if prior is not None else None

    slugs = []
    for index, row in changed_rows.iterrows():
        change_set = {
            key: value for key, value in row.items() if not _is_missing(value)
        }

        record = None
        if prior_rows is not None and index in prior_rows.index:
            record = _row_to_record(prior_rows.loc[index])
            if record_type is not None:
                record = record_type(**record)

        updated = assigner.assign(change_set, record, field_spec, into=target)
        slugs.append(None if updated is change_set else updated[target])

    result = changes.copy()
    result[target] = pd.Series(slugs, index=changes.index, dtype=object)
    logger.debug(
        "Assigned %s slugs across %s rows",
        sum(slug is not None for slug in slugs),
        len(slugs),
    )
    return result
