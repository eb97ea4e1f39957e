"""
src/rtqueue/config.py
Configuración global del Heap y de la representación de colas.
Los valores por defecto pueden sobreescribirse por entorno o por Heap.
"""
import os

# Tamaño de página por defecto de la Arena de celdas
DEFAULT_PAGE_SIZE = int(os.environ.get("RTQUEUE_PAGE_SIZE", "4096"))

# Candado en cada mutación del Heap (RLock). Desactivar solo en un único hilo.
THREAD_SAFE = os.environ.get("RTQUEUE_THREAD_SAFE", "1") not in ("0", "false", "no")

# Elementos máximos en __repr__ antes de truncar con '...'
REPR_LIMIT = 10

HEAP_CONFIG = {
    "page_size": DEFAULT_PAGE_SIZE,
    "thread_safe": THREAD_SAFE,
}
