from typing import Any, Dict, List

from sqlmodel import Session, col, select

from bruce.base import CRUDBase
from bruce.memory.models import Memory

LIKE_ESCAPE = "\\"


def _escape_like(term: str) -> str:
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


class CRUDMemory(CRUDBase[Memory]):
    def get_all_as_mapping(self, session: Session) -> Dict[str, Any]:
        return {m.key: m.value for m in self.get_multi(session)}

    def put(self, session: Session, *, key: str, value: Any) -> Memory:
        return self.upsert(session, field="key", value=key, values={"value": value})

    def search(self, session: Session, *, q: str) -> List[Memory]:
        """Entries whose key contains ``q``, ignoring case. Empty ``q`` matches all."""
        statement = select(Memory)
        if q:
            pattern = f"%{_escape_like(q)}%"
            statement = statement.where(col(Memory.key).ilike(pattern, escape=LIKE_ESCAPE))
        return list(session.exec(statement).all())


memory = CRUDMemory(Memory)
