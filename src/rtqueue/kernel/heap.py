"""
src/rtqueue/kernel/heap.py
Heap v1.0: puente entre las celdas de la cola y la Arena física.

Propiedad de referencias:
- new_cell() retiene todo handle que guarda y devuelve un handle propio (ref=1).
- Quien guarda un handle (celda o cola) posee una referencia.
- release() en cascada es ITERATIVO: cadenas de 1M+ celdas no desbordan la pila.
"""
import contextlib
import threading
from typing import Any, Dict, Optional

from .. import config
from ..memory.allocator import MemoryPool
from .cell import Cell, IDLE


class Heap:
    __slots__ = ('name', 'lock', '_pool', '_steps')

    def __init__(self, name: str = "default", page_size: Optional[int] = None,
                 thread_safe: Optional[bool] = None):
        if page_size is None:
            page_size = config.HEAP_CONFIG["page_size"]
        if thread_safe is None:
            thread_safe = config.HEAP_CONFIG["thread_safe"]

        self.name = name
        self.lock = threading.RLock() if thread_safe else contextlib.nullcontext()
        self._pool = MemoryPool(name=f"Heap-{name}", page_size=page_size, lock=self.lock)
        self._steps = 0

    # --- Construcción ---
    def new_cell(self, value: Any, next: Optional[int] = None, state=IDLE) -> int:
        cell = Cell(value, next, state)
        with self.lock:
            for h in cell.handles():
                self._pool.retain(h)
            return self._pool.alloc(cell)

    # --- Lectura ---
    def cell(self, h: int) -> Cell:
        return self._pool.get(h)

    def value(self, h: int) -> Any:
        return self._pool.get(h).value

    def next(self, h: int) -> Optional[int]:
        return self._pool.get(h).next

    # --- Ciclo de vida ---
    def retain(self, h: Optional[int]):
        if h is not None:
            self._pool.retain(h)

    def release(self, h: Optional[int]):
        """Suelta una referencia; libera en cascada lo que quede sin dueño."""
        if h is None:
            return
        with self.lock:
            pending = [h]
            while pending:
                idx = pending.pop()
                cell = self._pool.get(idx)
                if self._pool.release(idx):
                    pending.extend(cell.handles())

    def ref_count(self, h: int) -> int:
        return self._pool.ref_count(h)

    # --- Instrumentación ---
    def count_step(self):
        self._steps += 1

    def stats(self) -> Dict[str, Any]:
        out = self._pool.stats()
        out["steps"] = self._steps
        return out

    def __repr__(self):
        s = self._pool.stats()
        return f"<Heap {self.name!r} active={s['active']} capacity={s['capacity']}>"


_DEFAULT_HEAP = Heap("default")


def default_heap() -> Heap:
    """Heap compartido por las colas creadas sin Heap explícito."""
    return _DEFAULT_HEAP
