"""
List view state

A view holds the rows it last loaded from one hosted collection. Writes go to
the hosted service one call at a time, and the local list changes only after
the service confirms the write.
"""
import enum
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from clerkdesk.core.logger import logger
from clerkdesk.db.backend import HostedBackend, TableQuery
from clerkdesk.services.aggregation import matches_search
from clerkdesk.utils.exceptions import BackendCallError

Record = Dict[str, Any]


# ============================================================================
# Reducers
# ============================================================================

def _same_id(left: Any, right: Any) -> bool:
    # Path parameters arrive as strings, stored ids are usually numbers
    return left is not None and right is not None and str(left) == str(right)


def prepend_record(items: Sequence[Record], record: Record) -> List[Record]:
    return [dict(record), *items]


def patch_record(items: Sequence[Record], record_id: Any, fields: Mapping[str, Any]) -> List[Record]:
    """Overwrite only ``fields`` on the matching record."""
    return [{**item, **fields} if _same_id(item.get("id"), record_id) else item for item in items]


def remove_record(items: Sequence[Record], record_id: Any) -> List[Record]:
    return [item for item in items if not _same_id(item.get("id"), record_id)]


# ============================================================================
# View model
# ============================================================================

@dataclass(frozen=True)
class OrderBy:
    column: str
    desc: bool = True
    nulls_first: Optional[bool] = None


class AfterWrite(str, enum.Enum):
    """What a successful insert does to the local list"""
    refetch = "refetch"
    prepend = "prepend"
    keep = "keep"


class RecordListView:
    def __init__(
        self,
        backend: HostedBackend,
        collection: Union[str, enum.Enum],
        *,
        order: Sequence[OrderBy] = (),
        filters: Optional[Mapping[str, Any]] = None,
        columns: str = "*",
        search_text: Sequence[str] = (),
        search_numbers: Sequence[str] = (),
    ):
        self.backend = backend
        self.collection = getattr(collection, "value", collection)
        self.order = tuple(order)
        self.filters = dict(filters or {})
        self.columns = columns
        self.search_text = tuple(search_text)
        self.search_numbers = tuple(search_numbers)

        self.items: List[Record] = []
        self.error: Optional[str] = None

    def _table(self) -> TableQuery:
        return self.backend.table(self.collection)

    def _read_query(self) -> TableQuery:
        query = self._table().select(self.columns)
        for column, value in self.filters.items():
            query = query.eq(column, value)
        for term in self.order:
            query = query.order(term.column, desc=term.desc, nulls_first=term.nulls_first)
        return query

    def _fail(self, action: str, error, message: str) -> BackendCallError:
        logger.error(
            "Failed to %s %s: %s", action, self.collection, error.message,
            extra={"code": error.code, "status": error.status},
        )
        return BackendCallError(message, error)

    async def refresh(self) -> "RecordListView":
        """Reload the list. A failed read keeps the previous items and records the error."""
        data, error = await self._read_query().execute()
        if error:
            logger.error("Failed to load %s: %s", self.collection, error.message)
            self.error = error.message
            return self
        self.items = list(data or [])
        self.error = None
        return self

    async def create(
        self,
        payload: Mapping[str, Any],
        *,
        failure_message: str,
        after: AfterWrite = AfterWrite.refetch,
    ) -> Optional[Record]:
        """
        Insert one row. Returns the stored row when the service sends it back
        (``AfterWrite.prepend``), otherwise ``None``.
        """
        query = self._table()
        if after is AfterWrite.prepend:
            query = query.insert(dict(payload)).single()
        else:
            query = query.insert(dict(payload), returning=False)

        data, error = await query.execute()
        if error:
            raise self._fail("insert into", error, failure_message)

        if after is AfterWrite.prepend:
            self.items = prepend_record(self.items, data)
            return data
        if after is AfterWrite.refetch:
            await self.refresh()
        return None

    async def update(self, record_id: Any, values: Mapping[str, Any], *, failure_message: str) -> "RecordListView":
        data, error = await self._table().update(dict(values), returning=False).eq("id", record_id).execute()
        if error:
            raise self._fail("update", error, failure_message)
        return await self.refresh()

    async def remove(self, record_id: Any, *, failure_message: str) -> "RecordListView":
        data, error = await self._table().delete().eq("id", record_id).execute()
        if error:
            raise self._fail("delete from", error, failure_message)
        self.items = remove_record(self.items, record_id)
        return self

    def search(self, term: Optional[str]) -> List[Record]:
        if not term:
            return list(self.items)
        return [
            item for item in self.items
            if matches_search(item, term, self.search_text, self.search_numbers)
        ]

    def state(self, term: Optional[str] = None) -> Dict[str, Any]:
        return {"items": self.search(term), "error": self.error}
