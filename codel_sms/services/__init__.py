"""Planning and validation services."""

from codel_sms.services.personalization import PersonalizationEngine
from codel_sms.services.planner import PlanningContext, ReceiverMessagePlanner
from codel_sms.services.dispatch import (
    BatchDispatch,
    Dispatch,
    DispatchMode,
    DispatchModeResolver,
    SingleDispatch,
)

__all__ = [
    "PersonalizationEngine",
    "PlanningContext",
    "ReceiverMessagePlanner",
    "BatchDispatch",
    "Dispatch",
    "DispatchMode",
    "DispatchModeResolver",
    "SingleDispatch",
]
