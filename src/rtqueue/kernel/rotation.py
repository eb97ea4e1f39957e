"""
src/rtqueue/kernel/rotation.py
Motor de Rotación Incremental (Okasaki, real-time queue).

La rotación front ++ reverse(back) no se evalúa de golpe: se codifica como
deuda (Pending) dentro de la propia cadena y cada operación externa paga
exactamente un paso. La celda que el llamador está a punto de cruzar es
justo la que debe pagar, así que no hace falta un schedule aparte.
"""
import logging
from typing import Optional

from ..errors import ImbalanceError
from .cell import IDLE, Pending
from .heap import Heap

logger = logging.getLogger(__name__)


def merge(heap: Heap, front: Optional[int], back: Optional[int]) -> Optional[int]:
    """
    Inicia una rotación de 'front' con la pila 'back' (un elemento más larga).
    Sin front la fusión es trivial: back pasa a ser el front tal cual.
    Retorna un handle propio (el llamador debe soltarlo).
    """
    if front is None:
        heap.retain(back)
        return back

    if back is None:
        logger.error("merge: front=%s sin back en heap '%s'", front, heap.name)
        raise ImbalanceError("CRITICAL: merge: front presente con back vacío")

    head = heap.cell(front)
    logger.debug("merge: nueva rotación desde handle %s", front)
    return heap.new_cell(head.value, head.next, Pending(back, None))


def force_step(heap: Heap, node: int) -> bool:
    """
    Paga una unidad de deuda anclada en 'node'.
    Retorna False si la celda no debía nada (no-op), True si avanzó la fusión.
    """
    with heap.lock:
        cell = heap.cell(node)
        state = cell.state
        if state is IDLE:
            return False

        # Claim: a partir de aquí nadie más puede pagar esta deuda
        cell.state = IDLE
        source, acc = state

        # 1. Siguiente elemento de la cadena fusionada
        built = heap.new_cell(heap.value(source), acc)

        # 2. Siguiente elemento de back a reubicar
        source_next = heap.next(source)
        if source_next is None:
            logger.error("force_step: cadena de rotación agotada en handle %s", node)
            raise ImbalanceError("CRITICAL: force_step: longitudes de front/back descompensadas")

        # 3. Quién arrastra la deuda restante
        old_next = cell.next
        if old_next is not None:
            carrier = heap.cell(old_next)
            replacement = heap.new_cell(carrier.value, carrier.next, Pending(source_next, built))
        else:
            # Último paso: el último de back enlaza directamente con lo fusionado
            replacement = heap.new_cell(heap.value(source_next), built)

        # 4. Única reescritura de 'next' (la celda hereda la referencia)
        cell.next = replacement

        heap.release(built)
        heap.release(source)
        heap.release(acc)
        heap.release(old_next)
        heap.count_step()
        return True
