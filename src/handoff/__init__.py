from .consent import PairConsent, HandoffOutcome
from .coordinator import HandoffCoordinator

__all__ = ["HandoffCoordinator", "HandoffOutcome", "PairConsent"]
