from datetime import datetime
from typing import Optional

from sqlmodel import Session

from bruce.auth.models import Credential
from bruce.base import CRUDBase


class CRUDCredential(CRUDBase[Credential]):
    def get_by_spotify_id(self, session: Session, *, spotify_id: str) -> Optional[Credential]:
        return self.get_by(session, field="spotify_id", value=spotify_id)

    def upsert_tokens(
        self,
        session: Session,
        *,
        spotify_id: str,
        access_token: str,
        refresh_token: Optional[str],
        expires_at: datetime,
    ) -> Credential:
        return self.upsert(
            session,
            field="spotify_id",
            value=spotify_id,
            values={
                "access_token": access_token,
                "refresh_token": refresh_token,
                "expires_at": expires_at,
            },
        )


credential = CRUDCredential(Credential)
