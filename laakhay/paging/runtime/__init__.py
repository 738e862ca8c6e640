"""Runtime orchestration components."""

from .chunking import Chunking
from .observable import Observable, ObservableList
from .paging import Paging

__all__ = [
    "Paging",
    "Chunking",
    "Observable",
    "ObservableList",
]
