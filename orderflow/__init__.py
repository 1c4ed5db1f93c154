"""
orderflow — effect orchestration for order processing.

    from orderflow import domain as D        # Orders, customers, results
    from orderflow import compute as K       # Pure calculations
    from orderflow import effects as F       # Collaborator protocols + classifier
    from orderflow import retry as R         # Retry policies
    from orderflow import orchestrator as O  # process_order
"""

from orderflow import domain
from orderflow import compute
from orderflow import effects
from orderflow import retry
from orderflow import lift
from orderflow import orchestrator
from orderflow._types import (
    EffectCall,
    Attempted,
    Outcome,
)
from orderflow.orchestrator import Orchestrator

__version__ = "0.1.0"

__all__ = (
    "domain",
    "compute",
    "effects",
    "retry",
    "lift",
    "orchestrator",
    "EffectCall",
    "Attempted",
    "Outcome",
    "Orchestrator",
)
