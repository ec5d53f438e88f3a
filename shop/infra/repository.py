"""
Accès générique à une table Supabase (PostgREST), typé par un modèle pydantic.

Les repositories métier (carts, orders) composent une ou plusieurs instances de
TableRepository plutôt que d'en hériter: chaque instance connaît sa table, son
modèle et sa colonne d'identifiant.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar
import logging

from pydantic import BaseModel
from supabase import Client

from shop.infra import supabase_client

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class TableRepository(Generic[T]):
    def __init__(
        self,
        table: str,
        model: Type[T],
        client: Optional[Client] = None,
        id_column: str = "id",
    ):
        self.table = table
        self.model = model
        self.id_column = id_column
        self._client = client

    @property
    def client(self) -> Client:
        # Résolu à la demande: l'import du module ne doit pas exiger de clé Supabase
        if self._client is None:
            self._client = supabase_client.get_service_supabase()
        return self._client

    def _query(self):
        return self.client.table(self.table)

    def _to_model(self, row: Optional[Dict[str, Any]]) -> Optional[T]:
        return self.model.model_validate(row) if row else None

    def _to_models(self, rows: Optional[List[Dict[str, Any]]]) -> List[T]:
        return [self.model.model_validate(r) for r in rows or []]

    def find_by_id(self, id_: int, columns: str = "*") -> Optional[T]:
        res = self._query().select(columns).eq(self.id_column, id_).limit(1).execute()
        rows = res.data or []
        return self._to_model(rows[0]) if rows else None

    def find_all(self) -> List[T]:
        res = self._query().select("*").execute()
        return self._to_models(res.data)

    def find_by(
        self,
        filters: Dict[str, Any],
        *,
        columns: str = "*",
        order_by: Optional[str] = None,
        desc: bool = False,
        limit: Optional[int] = None,
    ) -> List[T]:
        """
        Sélection par égalité sur chaque colonne de `filters`.
        - order_by/desc: tri optionnel (ex: created_at)
        - limit: nombre maximal de lignes
        """
        query = self._query().select(columns)
        for column, value in filters.items():
            query = query.eq(column, value)
        if order_by:
            query = query.order(order_by, desc=desc)
        if limit is not None:
            query = query.limit(limit)
        res = query.execute()
        return self._to_models(res.data)

    def find_one_by(self, filters: Dict[str, Any], columns: str = "*") -> Optional[T]:
        rows = self.find_by(filters, columns=columns, limit=1)
        return rows[0] if rows else None

    def create(self, data: Dict[str, Any]) -> T:
        now = utcnow_iso()
        payload = {"created_at": now, "updated_at": now, **data}
        try:
            res = self._query().insert(payload).execute()
        except Exception:
            logger.exception("repository.create failed table=%s", self.table)
            raise
        rows = res.data or []
        if not rows:
            raise RuntimeError(f"Insertion sans retour dans '{self.table}'")
        return self.model.model_validate(rows[0])

    def create_many(self, rows: Iterable[Dict[str, Any]]) -> List[T]:
        now = utcnow_iso()
        payload = [{"created_at": now, "updated_at": now, **r} for r in rows]
        if not payload:
            return []
        try:
            res = self._query().insert(payload).execute()
        except Exception:
            logger.exception("repository.create_many failed table=%s count=%s", self.table, len(payload))
            raise
        return self._to_models(res.data)

    def update(
        self,
        id_: int,
        patch: Dict[str, Any],
        *,
        only_if: Optional[Dict[str, Iterable[Any]]] = None,
    ) -> Optional[T]:
        """
        Patch partiel d'une ligne; updated_at est toujours rafraîchi.
        - only_if: {colonne: valeurs autorisées}, l'écriture n'a lieu que si la
          ligne courante satisfait chaque condition (retourne None sinon).
        """
        query = self._query().update({**patch, "updated_at": utcnow_iso()}).eq(self.id_column, id_)
        for column, allowed in (only_if or {}).items():
            query = query.in_(column, list(allowed))
        try:
            res = query.execute()
        except Exception:
            logger.exception("repository.update failed table=%s id=%s", self.table, id_)
            raise
        rows = res.data or []
        return self._to_model(rows[0]) if rows else None

    def delete(self, id_: int) -> bool:
        try:
            res = self._query().delete().eq(self.id_column, id_).execute()
        except Exception:
            logger.exception("repository.delete failed table=%s id=%s", self.table, id_)
            raise
        return bool(res.data)

