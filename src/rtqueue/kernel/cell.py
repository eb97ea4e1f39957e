"""
src/rtqueue/kernel/cell.py
Celda enlazada de la cola y su estado de rotación.

Estado (variante etiquetada, sin estados ilegales):
- IDLE: sin deuda anclada en la celda.
- Pending(source, accumulator): un paso de rotación suspendido.
    source      -> handle del siguiente nodo de la cadena original a reubicar.
    accumulator -> handle de la cola ya fusionada (None en el primer paso).
Transición monótona: Pending -> IDLE, una sola vez, en force_step.
"""
from typing import Any, NamedTuple, Optional, Tuple


class _Idle:
    __slots__ = ()

    def __repr__(self):
        return "IDLE"


IDLE = _Idle()


class Pending(NamedTuple):
    source: int
    accumulator: Optional[int] = None


class Cell:
    """
    Registro físico de un slot de la Arena.
    'value' es fijo; 'next' y 'state' solo los reescribe el motor de rotación.
    """
    __slots__ = ('value', 'next', 'state')

    def __init__(self, value: Any, next: Optional[int] = None, state=IDLE):
        self.value = value
        self.next = next
        self.state = state

    @property
    def is_pending(self) -> bool:
        return self.state is not IDLE

    def handles(self) -> Tuple[int, ...]:
        """Handles que esta celda mantiene vivos (next + deuda pendiente)."""
        out = []
        if self.next is not None:
            out.append(self.next)
        if self.state is not IDLE:
            out.append(self.state.source)
            if self.state.accumulator is not None:
                out.append(self.state.accumulator)
        return tuple(out)

    def __repr__(self):
        return f"<Cell {self.value!r} next={self.next} {self.state!r}>"
