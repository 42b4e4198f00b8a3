"""Base classes for configuration and state models.

This module contains the foundation the other models build on:
- Closeable Protocol for resource cleanup
- BaseCloseable for the close cascade
- BaseConfig for configuration sections
- BaseState for runtime state sections

Kept apart from config.py so that log.py can build on them
without importing the whole configuration tree.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

# ============================================================
# CLOSEABLE PROTOCOL AND BASE CLASS
# ============================================================

@runtime_checkable
class Closeable(Protocol):
    """Anything with a close() method."""

    def close(self) -> None:
        """Release held resources."""
        ...


class BaseCloseable(BaseModel):
    """Model that closes its Closeable fields when it is closed.

    Closing cascades down the tree, e.g.
    Config.close() -> Logger.close() -> FileSink.close().
    One failing child does not stop the others from closing.
    """

    def close(self):
        """Close every Closeable field of this model.

        Errors from a child are written to stderr and the
        remaining children are still closed.
        """
        for field_name in self.__class__.model_fields:
            child = getattr(self, field_name, None)
            if child is None or not isinstance(child, Closeable):
                continue
            try:
                child.close()
            except Exception as e:
                print(
                    f"Warning: error closing {field_name}: {e}",
                    file=sys.stderr,
                )

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        """Context manager exit, closes all children."""
        self.close()
        return False


# ============================================================
# BASE CLASSES (markers for configuration vs runtime state)
# ============================================================

class BaseConfig(BaseCloseable):
    """Base class for configuration sections.

    Marks a model as configuration, loaded from action inputs,
    YAML, env or CLI, rather than state mutated during a run.
    """


class BaseState(BaseCloseable):
    """Base class for runtime state sections.

    Marks a model as state that the workflow nodes mutate while
    a run executes.
    """


__all__ = ["Closeable", "BaseCloseable", "BaseConfig", "BaseState"]
