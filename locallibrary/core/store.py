import logging
from typing import Annotated, Any, Dict, Iterable, List, Optional, Type

from fastapi import Path, Request
from pydantic import BaseModel
from sqlalchemy import func, select
from starlette.concurrency import run_in_threadpool

from locallibrary.core.database import Base, make_engine, make_session_factory
from locallibrary.models import models
from locallibrary.schemas import schemas

logger = logging.getLogger("locallibrary.store")

# Path identity; anything outside the stored key range is answered like a
# malformed id.
Identity = Annotated[int, Path(ge=1, le=models.MAX_IDENTITY)]

RECORD_TYPES = {
    models.Author: schemas.AuthorRecord,
    models.Genre: schemas.GenreRecord,
    models.Book: schemas.BookRecord,
    models.BookInstance: schemas.BookInstanceRecord,
}


class CatalogStore:
    """Handle on the catalog database.

    Every operation opens its own session and runs it in the threadpool, so
    independent reads issued with ``asyncio.gather`` really overlap. Results are
    detached pydantic records; references stay as ids until the query layer
    joins them.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self.engine = None
        self.SessionLocal = None

    def open(self):
        self.engine = make_engine(self.database_url, echo=self.echo)
        self.SessionLocal = make_session_factory(self.engine)
        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Opened catalog store at {self.engine.url.render_as_string(hide_password=True)}")

    def close(self):
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Closed catalog store")
        self.engine = None
        self.SessionLocal = None

    async def _run(self, fn, *args):
        if self.SessionLocal is None:
            raise RuntimeError("Catalog store is not open")
        return await run_in_threadpool(self._in_session, fn, *args)

    def _in_session(self, fn, *args):
        db = self.SessionLocal()
        try:
            return fn(db, *args)
        finally:
            db.close()

    # -----------------------------
    # Reads
    # -----------------------------
    async def count(self, model, **filters) -> int:
        def op(db):
            return db.query(func.count(model.id)).filter(*_conditions(model, filters)).scalar()
        return await self._run(op)

    async def find(self, model, projection: Optional[Type[BaseModel]] = None, **filters) -> List[BaseModel]:
        def op(db):
            query = _select(db, model, projection).filter(*_conditions(model, filters))
            return _to_records(model, projection, query.order_by(model.id).all())
        return await self._run(op)

    async def find_by_id(self, model, record_id: int, projection: Optional[Type[BaseModel]] = None):
        def op(db):
            row = _select(db, model, projection).filter(model.id == record_id).first()
            if row is None:
                return None
            return _to_records(model, projection, [row])[0]
        return await self._run(op)

    async def find_by_ids(self, model, ids: Iterable[int], projection: Optional[Type[BaseModel]] = None) -> Dict[int, BaseModel]:
        wanted = set(ids)
        if not wanted:
            return {}

        def op(db):
            rows = _select(db, model, projection).filter(model.id.in_(wanted)).all()
            return {record.id: record for record in _to_records(model, projection, rows)}
        return await self._run(op)

    async def find_books_in_genre(self, genre_id: int, projection: Optional[Type[BaseModel]] = None):
        def op(db):
            book_ids = select(models.BookGenre.book_id).where(models.BookGenre.genre_id == genre_id)
            query = _select(db, models.Book, projection).filter(models.Book.id.in_(book_ids))
            return _to_records(models.Book, projection, query.order_by(models.Book.id).all())
        return await self._run(op)

    # -----------------------------
    # Writes
    # -----------------------------
    async def insert(self, model, data: Dict[str, Any]):
        def op(db):
            obj = model(**data)
            db.add(obj)
            db.commit()
            db.refresh(obj)
            return RECORD_TYPES[model].model_validate(obj)
        return await self._run(op)

    async def replace(self, model, record_id: int, data: Dict[str, Any]):
        def op(db):
            obj = db.query(model).filter(model.id == record_id).first()
            if obj is None:
                return None
            for key, value in data.items():
                setattr(obj, key, value)
            db.commit()
            db.refresh(obj)
            return RECORD_TYPES[model].model_validate(obj)
        return await self._run(op)

    async def delete(self, model, record_id: int) -> bool:
        def op(db):
            obj = db.query(model).filter(model.id == record_id).first()
            if obj is None:
                return False
            db.delete(obj)
            db.commit()
            return True
        return await self._run(op)


def _conditions(model, filters):
    return [getattr(model, name) == value for name, value in filters.items()]


def _select(db, model, projection):
    if projection is None:
        return db.query(model)
    return db.query(*[getattr(model, name) for name in projection.model_fields])


def _to_records(model, projection, rows):
    if projection is None:
        record_type = RECORD_TYPES[model]
        return [record_type.model_validate(obj) for obj in rows]
    return [projection.model_validate(row._asdict()) for row in rows]


def get_store(request: Request) -> CatalogStore:
    return request.app.state.store
