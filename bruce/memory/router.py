from typing import Any, Dict, List

from fastapi import APIRouter, Response

from bruce.deps import SessionDep
from bruce.memory.schemas import MemoryEntry, MemoryWrite
from bruce.memory.service import memory

router = APIRouter()


@router.get("", response_model=Dict[str, Any])
def get_all_memory(session: SessionDep) -> Any:
    """Every stored entry as a key to value mapping."""
    return memory.get_all_as_mapping(session)


@router.post("")
def put_memory(session: SessionDep, obj_in: MemoryWrite) -> Response:
    """Insert or overwrite one entry."""
    memory.put(session, key=obj_in.key, value=obj_in.value)
    return Response(status_code=200)


@router.get("/search", response_model=List[MemoryEntry])
def search_memory(session: SessionDep, q: str = "") -> Any:
    return memory.search(session, q=q)
