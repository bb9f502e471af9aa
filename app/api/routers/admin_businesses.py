"""
app/api/routers/admin_businesses.py

Admin endpoints mutating single businesses.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_business_admin_service
from app.repositories.business_repository import BusinessPersistenceError
from app.schemas.businesses import BusinessMutationResponse, FeaturedUpdateRequest
from app.services.business_admin_service import BusinessAdminService
from db.session import get_db

router = APIRouter(prefix="/admin/businesses", tags=["business-admin"])


@router.patch("/{place_id}/featured", response_model=BusinessMutationResponse)
def set_business_featured(
    place_id: str,
    payload: FeaturedUpdateRequest,
    db: Session = Depends(get_db),
    admin_service: BusinessAdminService = Depends(get_business_admin_service),
) -> BusinessMutationResponse:
    try:
        business = admin_service.set_featured(db, place_id, payload.featured)
    except BusinessPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to update business.",
        ) from exc
    if business is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Business not found.",
        )
    return BusinessMutationResponse(place_id=business.place_id, featured=business.featured)


@router.delete("/{place_id}", response_model=BusinessMutationResponse)
def delete_business(
    place_id: str,
    db: Session = Depends(get_db),
    admin_service: BusinessAdminService = Depends(get_business_admin_service),
) -> BusinessMutationResponse:
    try:
        deleted = admin_service.delete_business(db, place_id)
    except BusinessPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to delete business.",
        ) from exc
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Business not found.",
        )
    return BusinessMutationResponse(place_id=place_id, deleted=True)
