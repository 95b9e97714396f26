"""
SQLAlchemy row source.

Implements IRowSource for SQLAlchemy declarative models.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from sqlalchemy import event, inspect, select
from sqlalchemy.exc import CompileError
from sqlalchemy.orm import Session

from search_sync.core.interfaces import RowCallback
from search_sync.core.models import ColumnDescriptor
from search_sync.schema.type_mappings import TypeMapper


class SQLAlchemyRowSource:
    """
    Reads rows of a mapped class through a session factory.

    Implements the IRowSource interface for SQLAlchemy. Lifecycle callbacks
    are hooked to the mapper's ``after_insert``, ``after_update`` and
    ``after_delete`` events, which fire inside the flush.
    """

    def __init__(
        self,
        model: type,
        session_factory: Callable[[], Session],
        criteria: Tuple[Any, ...] = (),
    ):
        """
        Initialize SQLAlchemy row source.

        Args:
            model: Mapped class to read
            session_factory: Callable returning a new Session (e.g. a sessionmaker)
            criteria: Optional WHERE criteria limiting the rows read
        """
        self.model = model
        self.session_factory = session_factory
        self.criteria = tuple(criteria)
        self.mapper = inspect(model)
        self._listeners: List[Tuple[str, Callable]] = []

    @property
    def collection_name(self) -> str:
        return self.mapper.local_table.name

    def where(self, *criteria: Any) -> "SQLAlchemyRowSource":
        """Return a row source limited to rows matching extra criteria."""
        return SQLAlchemyRowSource(
            self.model, self.session_factory, self.criteria + criteria
        )

    def primary_key(self, row: Any) -> Tuple[Any, ...]:
        return tuple(self.mapper.primary_key_from_instance(row))

    def values(self, row: Any) -> Dict[str, Any]:
        """
        Get the in-memory column values of a row.

        Reads the instance state directly so no SQL is emitted, which keeps
        this safe to call from inside a flush.
        """
        state = inspect(row)
        return {attr.key: state.dict.get(attr.key) for attr in self.mapper.column_attrs}

    def each_page(self, size: int) -> Iterator[List[Any]]:
        """
        Yield rows in primary key order, ``size`` rows at a time.

        A single session stays open while pages are consumed.
        """
        offset = 0
        with self.session_factory() as session:
            while True:
                stmt = select(self.model)
                if self.criteria:
                    stmt = stmt.where(*self.criteria)
                stmt = stmt.order_by(*self.mapper.primary_key).limit(size).offset(offset)

                page = list(session.scalars(stmt))
                if not page:
                    break
                yield page
                if len(page) < size:
                    break
                offset += size

    def columns(self) -> Dict[str, ColumnDescriptor]:
        return {
            key: ColumnDescriptor(
                type=TypeMapper.logical_type(_python_type(column)),
                db_type=_db_type(column),
            )
            for key, column in self.mapper.columns.items()
        }

    def build_row(self, data: Dict[str, Any]) -> Any:
        keys = {attr.key for attr in self.mapper.column_attrs}
        return self.model(**{key: value for key, value in data.items() if key in keys})

    def subscribe(
        self, on_create: RowCallback, on_update: RowCallback, on_destroy: RowCallback
    ) -> None:
        for event_name, callback in (
            ("after_insert", on_create),
            ("after_update", on_update),
            ("after_delete", on_destroy),
        ):
            listener = _make_listener(callback)
            event.listen(self.model, event_name, listener)
            self._listeners.append((event_name, listener))

    def unsubscribe(self) -> None:
        while self._listeners:
            event_name, listener = self._listeners.pop()
            event.remove(self.model, event_name, listener)


def _make_listener(callback: RowCallback) -> Callable:
    def listener(mapper, connection, target):
        callback(target)

    return listener


def _python_type(column) -> Optional[type]:
    try:
        return column.type.python_type
    except NotImplementedError:
        return None


def _db_type(column) -> Optional[str]:
    try:
        return str(column.type).lower()
    except CompileError:
        return None
