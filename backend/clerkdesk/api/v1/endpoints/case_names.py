"""
Case type names used by the record forms
"""
from fastapi import APIRouter, Depends

from clerkdesk.api.deps import get_backend, require_session
from clerkdesk.core.logger import logger
from clerkdesk.core.session import Session
from clerkdesk.db.backend import HostedBackend
from clerkdesk.db.models import Collection
from clerkdesk.db.schemas import CaseNameOptions

router = APIRouter()


@router.get("/", response_model=CaseNameOptions)
async def list_case_names(
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    data, error = await backend.table(Collection.case_names).select("name").order("name").execute()
    if error:
        logger.error("Error fetching case names: %s", error.message)
        return {"names": [], "error": error.message}
    return {"names": [row["name"] for row in data or [] if row.get("name")], "error": None}
