"""
src/rtqueue/errors.py
Jerarquía de errores.
Dos categorías: cola vacía (esperable) y corrupción interna (fatal).
"""


class QueueError(Exception):
    """Base de todos los errores del paquete."""


class EmptyQueueError(QueueError, IndexError):
    """dequeue() sobre una cola vacía."""


class CorruptionError(QueueError, RuntimeError):
    """
    Violación de un invariante interno.
    Solo alcanzable por un bug de implementación, nunca por mal uso de la API.
    No se debe capturar para continuar: la cola quedaría corrupta.
    """


class ImbalanceError(CorruptionError):
    """Las cadenas front/back de una rotación tienen longitudes incompatibles."""


class DeadHandleError(CorruptionError):
    """Acceso a un slot de la Arena ya liberado."""
