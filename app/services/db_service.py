import asyncio
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from sqlalchemy import create_engine, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.errors import DomainConflictError, PersistenceError
from app.core.logger import logger
from app.models.db_models import Base, Booking, User

T = TypeVar("T")


class Database:
    """
    Owns the SQLAlchemy engine for the single-file store.
    Created once at startup and handed to every store that needs it.
    """

    def __init__(self, url: str, **engine_kwargs):
        connect_args = engine_kwargs.pop("connect_args", {})
        if url.startswith("sqlite"):
            # Store calls run in worker threads
            connect_args.setdefault("check_same_thread", False)

        self.url = url
        self.engine = create_engine(url, connect_args=connect_args, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    def init_schema(self):
        """Creates missing tables. Safe to call on every start."""
        Base.metadata.create_all(bind=self.engine)
        logger.info(f"✅ Database schema ready ({self.engine.url.render_as_string(hide_password=True)})")

    def dispose(self):
        self.engine.dispose()

    @contextmanager
    def session(self):
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    async def run(self, operation: str, work: Callable[[Session], T], conflict_message: Optional[str] = None) -> T:
        """
        Runs ``work(session)`` in a worker thread and awaits the result.
        Store failures surface as PersistenceError; integrity violations as
        DomainConflictError when ``conflict_message`` is given.
        """
        def _work():
            with self.session() as session:
                return work(session)

        try:
            return await asyncio.to_thread(_work)
        except IntegrityError as e:
            if conflict_message:
                logger.warning(f"⚠️ Conflict ({operation}): {e.orig}")
                raise DomainConflictError(conflict_message)
            logger.exception(f"❌ DB Error ({operation})")
            raise PersistenceError("Database operation failed")
        except SQLAlchemyError:
            logger.exception(f"❌ DB Error ({operation})")
            raise PersistenceError("Database operation failed")


class BookingStore:
    def __init__(self, db: Database):
        self.db = db

    async def insert(self, **fields) -> Booking:
        def _insert(session: Session) -> Booking:
            booking = Booking(**fields)
            session.add(booking)
            session.commit()
            session.refresh(booking)
            return booking

        return await self.db.run("insert_booking", _insert)

    async def get(self, booking_id: int) -> Optional[Booking]:
        return await self.db.run("get_booking", lambda session: session.get(Booking, booking_id))

    async def list_between(self, start: datetime, end: datetime) -> List[Booking]:
        """All bookings whose date lies in [start, end], whatever their status."""
        def _list(session: Session) -> List[Booking]:
            return (
                session.query(Booking)
                .filter(Booking.date >= start, Booking.date <= end)
                .all()
            )

        return await self.db.run("list_bookings_between", _list)

    async def search(self, status: Optional[str], search: Optional[str], limit: int, offset: int) -> Tuple[List[Booking], int]:
        """
        Filtered page of bookings plus the total number of matches.
        Ordered by status DESC, date ASC, time ASC.
        """
        def _search(session: Session):
            query = session.query(Booking)
            if status:
                query = query.filter(Booking.status == status)
            if search:
                pattern = f"%{search}%"
                query = query.filter(or_(
                    Booking.first_name.ilike(pattern),
                    Booking.last_name.ilike(pattern),
                    Booking.phone.ilike(pattern),
                    Booking.email.ilike(pattern),
                ))

            total = query.count()
            items = (
                query.order_by(Booking.status.desc(), Booking.date.asc(), Booking.time.asc())
                .limit(limit)
                .offset(offset)
                .all()
            )
            return items, total

        return await self.db.run("search_bookings", _search)

    async def update(self, booking_id: int, changes: Dict) -> int:
        """Single UPDATE statement. Returns the number of rows touched."""
        def _update(session: Session) -> int:
            count = session.query(Booking).filter(Booking.id == booking_id).update(changes)
            session.commit()
            return count

        return await self.db.run("update_booking", _update)


class UserStore:
    def __init__(self, db: Database):
        self.db = db

    async def get(self, user_id: int) -> Optional[User]:
        return await self.db.run("get_user", lambda session: session.get(User, user_id))

    async def get_by_name(self, name: str) -> Optional[User]:
        return await self.db.run(
            "get_user_by_name",
            lambda session: session.query(User).filter(User.name == name).first(),
        )

    async def list_all(self) -> List[User]:
        return await self.db.run("list_users", lambda session: session.query(User).order_by(User.id).all())

    async def insert(self, name: str, password_hash: str, role: str) -> User:
        def _insert(session: Session) -> User:
            user = User(name=name, password=password_hash, role=role)
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

        return await self.db.run("insert_user", _insert, conflict_message="User name already exists")

    async def update(self, user_id: int, changes: Dict) -> int:
        def _update(session: Session) -> int:
            count = session.query(User).filter(User.id == user_id).update(changes)
            session.commit()
            return count

        return await self.db.run("update_user", _update, conflict_message="User name already exists")

    async def delete(self, user_id: int) -> int:
        def _delete(session: Session) -> int:
            count = session.query(User).filter(User.id == user_id).delete()
            session.commit()
            return count

        return await self.db.run("delete_user", _delete)
