"""Workflow orchestration.

The graph lives in ``cloudship.workflows.ship``. Importing it here would
create a cycle with ``cloudship.detectors``.
"""

from cloudship.workflows.state import (
    ChooseCallback,
    Option,
    ProgressCallback,
    Severity,
    ShipOutcome,
    ShipState,
    Step,
    first_option,
)

__all__ = [
    "ChooseCallback",
    "Option",
    "ProgressCallback",
    "Severity",
    "ShipOutcome",
    "ShipState",
    "Step",
    "first_option",
]
