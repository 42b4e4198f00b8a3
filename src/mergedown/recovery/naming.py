"""Recovery branch naming."""

from __future__ import annotations

from datetime import date


def recovery_branch_name(
    head: str, on: date, suffix: str = "sync"
) -> str:
    """Name of the recovery branch for ``head`` on a given day.

    Format is ``<head>_<suffix>_<DD_MM_YYYY>`` with zero-padded
    day and month, independent of locale. Running twice on the
    same day yields the same name.

    Example:
        >>> recovery_branch_name("feature_x", date(2024, 3, 7))
        'feature_x_sync_07_03_2024'
    """
    return f"{head}_{suffix}_{on.day:02d}_{on.month:02d}_{on.year:04d}"
