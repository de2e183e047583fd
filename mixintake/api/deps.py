from fastapi import Depends, HTTPException, status

from mixintake.core import database
from mixintake.core.config import Settings, get_settings
from mixintake.services.lookup_service import LookupService
from mixintake.services.row_store import RowStore, SqlRowStore
from mixintake.services.submission_service import SubmissionService


def get_row_store() -> RowStore:
    """
    Row store bound to the application's session factory.

    Overridden in tests with a store on an in-memory database.
    """
    if database.async_session_factory is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not initialized",
        )
    return SqlRowStore(database.async_session_factory)


def get_submission_service(
    store: RowStore = Depends(get_row_store),
    settings: Settings = Depends(get_settings),
) -> SubmissionService:
    return SubmissionService(store, settings=settings)


def get_lookup_service(
    store: RowStore = Depends(get_row_store),
    settings: Settings = Depends(get_settings),
) -> LookupService:
    return LookupService(store, settings=settings)
