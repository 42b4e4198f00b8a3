"""Dependencies injected into workflow nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from mergedown.core.actions import ActionsReporter
from mergedown.github.client import HostingApi


@dataclass
class MergeDeps:
    """Collaborators for one run.

    Attributes:
        api: Repository API (GitHubClient, or a fake in tests)
        reporter: Where outputs and the failure status are reported
        today: Date used to name the recovery branch
    """

    api: HostingApi
    reporter: ActionsReporter
    today: date = field(default_factory=date.today)
