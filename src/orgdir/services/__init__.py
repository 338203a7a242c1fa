"""
Directory services: the transactional orchestrator and the read composer.
"""

from .person_orchestrator import PersonAggregateOrchestrator
from .person_reader import PersonReadComposer

__all__ = ["PersonAggregateOrchestrator", "PersonReadComposer"]
