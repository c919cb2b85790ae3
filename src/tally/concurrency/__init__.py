from .concurrent_counter import ConcurrentCounter
from .parallel import Parallel

__all__ = [
    "ConcurrentCounter",
    "Parallel",
]
