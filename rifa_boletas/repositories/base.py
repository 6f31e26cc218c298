# ==============================================================================
# REPOSITORIO BASE - Almacén de colecciones JSON con caché en memoria
# ==============================================================================
# CollectionStore es el único objeto que toca disco. Tiene ciclo de vida
# explícito (open/close), lo crea el AppContainer y se pasa por referencia a
# cada repositorio. No hay estado global.
#
# Al migrar a otra base de datos:
# - Esta clase se reemplaza por una conexión
# - load/save se convierten en queries
# - El lock se reemplaza por transacciones
# ==============================================================================

import json
import os
import threading
from typing import Any, Callable, Dict, List, Optional

from rifa_boletas.errors import StorageError
from rifa_boletas.models import utc_now_iso


class CollectionStore:
    """
    Carga, cachea y guarda colecciones con nombre (tickets, customers) y
    documentos únicos (config) como archivos JSON dentro de `data_dir`.

    Reglas:
    - load() retorna una COPIA de la lista cacheada; los diccionarios de
      registro se tratan como inmutables (los repositorios los reemplazan,
      nunca los modifican en sitio).
    - save() escribe a un archivo temporal y lo renombra; solo si eso
      funciona se actualiza la caché. Un fallo no deja escrituras a medias
      visibles para otros lectores del proceso.
    - JSON corrupto es un error fatal (StorageError), sin migraciones.
    """

    def __init__(self, data_dir: str):
        """
        Args:
            data_dir: Carpeta donde viven los archivos JSON
        """
        self.data_dir = data_dir
        self._cache: Dict[str, Any] = {}
        self._lock = threading.RLock()
        self._is_open = False

    # =========================================================================
    # CICLO DE VIDA
    # =========================================================================

    def open(self) -> 'CollectionStore':
        with self._lock:
            try:
                os.makedirs(self.data_dir, exist_ok=True)
            except OSError as e:
                raise StorageError(f'No se pudo crear la carpeta de datos: {e}')
            self._is_open = True
        return self

    def close(self) -> None:
        with self._lock:
            self._cache.clear()
            self._is_open = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def lock(self) -> threading.RLock:
        """Lock re-entrante para secuencias leer-modificar-escribir."""
        return self._lock

    def __enter__(self) -> 'CollectionStore':
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if not self._is_open:
            raise StorageError('El almacén de datos está cerrado')

    def path_for(self, name: str) -> str:
        return os.path.join(self.data_dir, f'{name}.json')

    # =========================================================================
    # COLECCIONES (listas)
    # =========================================================================

    def load(self, name: str) -> List[Dict[str, Any]]:
        """
        Retorna los registros de una colección.

        Si no está en caché, crea el archivo con [] si no existe, lo lee,
        lo parsea y lo cachea.

        Raises:
            StorageError: Archivo ilegible, JSON inválido o almacén cerrado
        """
        with self._lock:
            self._ensure_open()
            if name not in self._cache:
                data = self._read_or_init(name, list)
                if not isinstance(data, list):
                    raise StorageError(f'Datos inválidos en {self.path_for(name)}: se esperaba una lista')
                self._cache[name] = data
            return list(self._cache[name])

    def save(self, name: str, records: List[Dict[str, Any]]) -> None:
        """Sobrescribe la colección en disco y en caché."""
        with self._lock:
            self._ensure_open()
            data = list(records)
            self._write_raw(self.path_for(name), data)
            self._cache[name] = data

    # =========================================================================
    # DOCUMENTOS ÚNICOS (diccionarios)
    # =========================================================================

    def load_document(self, name: str, default_factory: Callable[[], Dict[str, Any]] = dict) -> Dict[str, Any]:
        """
        Igual que load() pero para un documento único (ej: config.json).

        Args:
            name: Nombre del documento
            default_factory: Contenido con el que se inicializa el archivo
        """
        with self._lock:
            self._ensure_open()
            if name not in self._cache:
                data = self._read_or_init(name, default_factory)
                if not isinstance(data, dict):
                    raise StorageError(f'Datos inválidos en {self.path_for(name)}: se esperaba un objeto')
                self._cache[name] = data
            return dict(self._cache[name])

    def save_document(self, name: str, document: Dict[str, Any]) -> None:
        with self._lock:
            self._ensure_open()
            data = dict(document)
            self._write_raw(self.path_for(name), data)
            self._cache[name] = data

    # =========================================================================
    # CACHÉ
    # =========================================================================

    def clear_cache(self) -> None:
        """Fuerza a que el próximo load() relea desde disco."""
        with self._lock:
            self._cache.clear()

    # =========================================================================
    # ACCESO A DISCO
    # =========================================================================

    def _read_or_init(self, name: str, default_factory: Callable[[], Any]) -> Any:
        path = self.path_for(name)
        if not os.path.exists(path):
            self._write_raw(path, default_factory())
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise StorageError(f'JSON inválido en {path}: {e}')
        except OSError as e:
            raise StorageError(f'No se pudo leer {path}: {e}')

    def _write_raw(self, path: str, data: Any) -> None:
        # Escribir a archivo temporal primero para atomicidad
        temp_path = path + '.tmp'
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(temp_path, path)
        except (OSError, TypeError, ValueError) as e:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise StorageError(f'No se pudo escribir {path}: {e}')


class ListRepository:
    """
    Repositorio base para una colección almacenada como lista.

    Ejemplo: tickets.json -> [{...}, {...}]

    Todas las búsquedas son recorridos lineales sobre la colección en
    memoria (O(n)); suficiente para unas 10.000 boletas.
    """

    collection: str = ''

    def __init__(self, store: CollectionStore):
        self.store = store

    def get_all(self) -> List[Dict[str, Any]]:
        return [dict(r) for r in self.store.load(self.collection)]

    def save_all(self, records: List[Dict[str, Any]]) -> None:
        self.store.save(self.collection, records)

    def find_by(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """Primer registro cuyo `field` es igual a `value`, o None."""
        for record in self.store.load(self.collection):
            if record.get(field) == value:
                return dict(record)
        return None

    def find_all_by(self, field: str, value: Any) -> List[Dict[str, Any]]:
        return [dict(r) for r in self.store.load(self.collection) if r.get(field) == value]

    def append(self, record: Dict[str, Any]) -> Dict[str, Any]:
        with self.store.lock:
            records = self.store.load(self.collection)
            records.append(dict(record))
            self.store.save(self.collection, records)
        return dict(record)

    def update_first(self, field: str, value: Any, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Fusiona `updates` en el primer registro que coincide y sella updatedAt.

        Returns:
            El registro actualizado o None si no existe
        """
        with self.store.lock:
            records = self.store.load(self.collection)
            for index, record in enumerate(records):
                if record.get(field) == value:
                    updated = {**record, **updates, 'updatedAt': utc_now_iso()}
                    records[index] = updated
                    self.store.save(self.collection, records)
                    return dict(updated)
        return None

    def remove_first(self, field: str, value: Any) -> bool:
        with self.store.lock:
            records = self.store.load(self.collection)
            for index, record in enumerate(records):
                if record.get(field) == value:
                    del records[index]
                    self.store.save(self.collection, records)
                    return True
        return False
