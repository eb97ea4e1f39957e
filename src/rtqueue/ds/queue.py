"""
src/rtqueue/ds/queue.py
Estructura de Datos Persistente: Real-Time Queue.
Worst-case O(1) FIFO operations (no amortizado).

Cada push_back/pop_front devuelve una cola NUEVA y deja intactas todas las
anteriores, incluso si se ramifican varias veces desde el mismo valor.

Representación: (front, back, jump)
- front: cadena legible en orden FIFO.
- back:  pila de elementos empujados desde la última rotación (orden inverso).
- jump:  celda donde toca pagar el siguiente paso de rotación.
         Su presencia ES la marca de "rotación en curso".
"""
from typing import Any, Iterable, Iterator, List, Optional, Tuple

from .. import config
from ..errors import EmptyQueueError
from ..kernel.heap import Heap, default_heap
from ..kernel.rotation import force_step, merge


class RealTimeQueue:
    """
    Cola FIFO Persistente Real-Time.
    Cada operación hace como mucho un paso de rotación + O(1) de contabilidad.
    """
    __slots__ = ('_heap', '_front', '_back', '_jump', '_size')

    def __init__(self, heap: Optional[Heap] = None):
        self._heap = heap if heap is not None else default_heap()
        self._front = None
        self._back = None
        self._jump = None
        self._size = 0

    @classmethod
    def empty(cls, heap: Optional[Heap] = None) -> 'RealTimeQueue':
        """Crea una cola vacía."""
        return cls(heap)

    @classmethod
    def from_iterable(cls, items: Iterable[Any], heap: Optional[Heap] = None) -> 'RealTimeQueue':
        """O(N). Construye desde un iterable Python respetando el orden."""
        q = cls(heap)
        for item in items:
            q = q.push_back(item)
        return q

    @classmethod
    def _make(cls, heap: Heap, front: Optional[int], back: Optional[int],
              jump: Optional[int], size: int) -> 'RealTimeQueue':
        # La cola nueva retiene sus tres handles; el llamador conserva los suyos.
        q = cls.__new__(cls)
        q._heap = heap
        heap.retain(front)
        heap.retain(back)
        heap.retain(jump)
        q._front = front
        q._back = back
        q._jump = jump
        q._size = size
        return q

    def push_back(self, value: Any) -> 'RealTimeQueue':
        """Añade al final. O(1) peor caso."""
        heap = self._heap
        new_node = heap.new_cell(value, self._back)

        if self._jump is not None:
            force_step(heap, self._jump)
            result = self._make(heap, self._front, new_node, heap.next(self._jump), self._size + 1)
        else:
            # Rotación nueva: front ++ reverse(back + [value])
            zipper = merge(heap, self._front, new_node)
            result = self._make(heap, zipper, None, zipper, self._size + 1)
            heap.release(zipper)

        heap.release(new_node)
        return result

    enqueue = push_back

    def pop_front(self) -> Optional[Tuple['RealTimeQueue', Any]]:
        """
        Retorna (NuevaCola, Head), o None si la cola está vacía.
        O(1) peor caso.
        """
        if self._front is None:
            return None

        heap = self._heap
        value = heap.value(self._front)

        if self._jump is not None:
            force_step(heap, self._jump)
            # Leer 'next' DESPUÉS del paso: front puede ser la propia celda jump
            result = self._make(heap, heap.next(self._front), self._back,
                                heap.next(self._jump), self._size - 1)
        else:
            zipper = merge(heap, heap.next(self._front), self._back)
            result = self._make(heap, zipper, None, zipper, self._size - 1)
            heap.release(zipper)

        return result, value

    def dequeue(self) -> Tuple[Any, 'RealTimeQueue']:
        """
        Retorna (Head, NuevaCola).
        Lanza EmptyQueueError si está vacía.
        """
        popped = self.pop_front()
        if popped is None:
            raise EmptyQueueError("dequeue from empty queue")
        rest, value = popped
        return value, rest

    def peek(self) -> Any:
        """Mira el primer elemento sin sacarlo (None si está vacía)."""
        if self._front is None:
            return None
        return self._heap.value(self._front)

    @property
    def is_empty(self) -> bool:
        return self._front is None

    @property
    def heap(self) -> Heap:
        return self._heap

    def to_list(self) -> List[Any]:
        return list(self)

    # --- PYTHON MAGIC METHODS ---

    def __iter__(self) -> Iterator[Any]:
        return QueueIterator(self)

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._front is not None

    def __copy__(self) -> 'RealTimeQueue':
        # Inmutable: copiar el handle es copiar la cola
        return self

    def __deepcopy__(self, memo) -> 'RealTimeQueue':
        return self

    def __eq__(self, other):
        """Igualdad por contenido, O(N)."""
        if not isinstance(other, RealTimeQueue):
            return NotImplemented
        if len(self) != len(other):
            return False
        return all(a == b for a, b in zip(self, other))

    __hash__ = None

    def __repr__(self):
        """Impresión segura. Trunca si es muy larga."""
        items = []
        for count, item in enumerate(self):
            if count >= config.REPR_LIMIT:
                items.append("...")
                break
            items.append(repr(item))
        return f"RealTimeQueue([{', '.join(items)}])"

    def __del__(self):
        heap = getattr(self, '_heap', None)
        if heap is None:
            return
        heap.release(self._front)
        heap.release(self._back)
        heap.release(self._jump)


class QueueIterator:
    """
    Lectura secuencial: hace pop_front sobre una copia privada.
    La cola original nunca se toca; cada iter() empieza de nuevo.
    """
    __slots__ = ('_queue',)

    def __init__(self, queue: RealTimeQueue):
        self._queue = queue

    def __iter__(self) -> 'QueueIterator':
        return self

    def __next__(self) -> Any:
        popped = self._queue.pop_front()
        if popped is None:
            raise StopIteration
        self._queue, value = popped
        return value
