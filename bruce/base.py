from datetime import datetime, timezone
from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, SQLModel, select

ModelType = TypeVar("ModelType", bound=SQLModel)

# dialect name -> INSERT construct supporting ON CONFLICT
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CRUDBase(Generic[ModelType]):
    def __init__(self, model: Type[ModelType]):
        """
        CRUD object with default methods to Read and Upsert.

        **Parameters**

        * `model`: A SQLModel model class with a unique column to upsert on
          and `created_at` / `updated_at` timestamps
        """
        self.model = model

    def get_by(self, session: Session, *, field: str, value: Any) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, field) == value)
        return session.exec(statement).first()

    def get_multi(self, session: Session) -> list[ModelType]:
        return list(session.exec(select(self.model)).all())

    def upsert(
        self, session: Session, *, field: str, value: Any, values: Dict[str, Any]
    ) -> ModelType:
        """Insert a row keyed by ``field == value`` or overwrite the existing one.

        Runs as a single ``INSERT ... ON CONFLICT DO UPDATE`` so concurrent
        writers of the same key never collide; the last one wins. ``field``
        must carry a unique constraint.
        """
        dialect = session.get_bind().dialect.name
        insert = UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"upsert is not supported on {dialect}")

        now = utcnow()
        statement = insert(self.model).values(
            {field: value, **values, "created_at": now, "updated_at": now}
        )
        statement = statement.on_conflict_do_update(
            index_elements=[field],
            set_={
                name: statement.excluded[name] for name in [*values, "updated_at"]
            },
        )
        session.exec(statement)
        session.commit()
        return self.get_by(session, field=field, value=value)
