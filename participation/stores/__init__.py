from participation.stores.interfaces import ParticipationStore
from participation.stores.memory_store import InMemoryParticipationStore
from participation.stores.unit_of_work import ChangeSet, ParticipationTransaction

__all__ = [
    "ChangeSet",
    "InMemoryParticipationStore",
    "ParticipationStore",
    "ParticipationTransaction",
]
