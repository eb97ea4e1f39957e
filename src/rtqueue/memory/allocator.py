"""
src/rtqueue/memory/allocator.py
Arena Allocator v5.0 (Cell Arena).
Slots mutables indexados por handle entero, con conteo de referencias.
"""
import logging
import threading
from typing import List, Deque, Optional, Dict, Any
from collections import deque

from ..errors import DeadHandleError

logger = logging.getLogger(__name__)


class MemoryPool:
    """
    Gestor de memoria física LIFO (Hot Cache).
    Cada slot guarda un registro mutable; compartir = copiar el índice.
    """
    __slots__ = (
        '_data', '_ref_counts', '_free_list', '_lock',
        '_capacity', '_name', '_active_count', '_page_size', '_allocations'
    )

    def __init__(self, name: str = "Unknown", page_size: int = 4096, lock=None):
        self._name = name
        self._page_size = page_size

        # RLock re-entrante por defecto: release() en cascada vuelve a entrar.
        # El Heap puede inyectar el suyo para compartir una única zona crítica.
        self._lock = lock if lock is not None else threading.RLock()

        # Estructuras Físicas
        self._data: List[Optional[Any]] = [None] * page_size
        self._ref_counts: List[int] = [0] * page_size

        # Cola de reciclaje (LIFO para caché caliente)
        self._free_list: Deque[int] = deque(range(page_size - 1, -1, -1))

        self._capacity = page_size
        self._active_count = 0
        self._allocations = 0

    def alloc(self, record: Any) -> int:
        """Asignación unitaria O(1). El llamador recibe la única referencia."""
        with self._lock:
            if not self._free_list:
                self._expand_memory(1)

            idx = self._free_list.pop()
            self._data[idx] = record
            self._ref_counts[idx] = 1
            self._active_count += 1
            self._allocations += 1
            return idx

    def retain(self, idx: int):
        """Keep Alive."""
        with self._lock:
            self._check_alive(idx)
            self._ref_counts[idx] += 1

    def release(self, idx: int) -> bool:
        """
        Decrementa ref. Retorna True si el slot murió y volvió a la free list.
        """
        with self._lock:
            self._check_alive(idx)
            self._ref_counts[idx] -= 1
            if self._ref_counts[idx] > 0:
                return False
            self._data[idx] = None
            self._free_list.append(idx)
            self._active_count -= 1
            return True

    def get(self, idx: int) -> Any:
        """Lectura sin bloqueo (Optimistic Read)."""
        record = self._data[idx] if 0 <= idx < self._capacity else None
        if record is None:
            raise DeadHandleError(f"CRITICAL: Arena '{self._name}': handle muerto o inexistente {idx}")
        return record

    def ref_count(self, idx: int) -> int:
        if 0 <= idx < self._capacity:
            return self._ref_counts[idx]
        return 0

    def _check_alive(self, idx: int):
        if not (0 <= idx < self._capacity) or self._ref_counts[idx] <= 0:
            raise DeadHandleError(f"CRITICAL: Arena '{self._name}': conteo inválido en handle {idx}")

    def _expand_memory(self, min_required: int = 1):
        """
        Estrategia de Crecimiento Elástica.
        Asegura que siempre haya espacio para 'min_required' items adicionales.
        """
        growth = max(self._capacity, self._page_size)
        if min_required > growth:
            growth = min_required + self._page_size

        logger.debug(
            "Arena '%s': expanding +%d slots (capacity %d -> %d)",
            self._name, growth, self._capacity, self._capacity + growth,
        )

        self._data.extend([None] * growth)
        self._ref_counts.extend([0] * growth)

        # Índices bajos primero al hacer pop() (LIFO sobre el final)
        self._free_list.extendleft(range(self._capacity, self._capacity + growth))

        self._capacity += growth

    def stats(self) -> Dict[str, Any]:
        """Introspección para monitoreo de salud."""
        with self._lock:
            return {
                "name": self._name,
                "capacity": self._capacity,
                "active": self._active_count,
                "free": len(self._free_list),
                "allocations": self._allocations,
                "fragmentation": 1.0 - (self._active_count / (self._capacity or 1)),
            }
