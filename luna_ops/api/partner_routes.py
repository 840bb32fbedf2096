"""Partner programme applications and admin review."""

from typing import Optional

from fastapi import APIRouter, Depends

from luna_ops.api.deps import get_services
from luna_ops.models.partners import ApplicationStatusUpdate, PartnerApplicationCreate, PartnerApplicationOut
from luna_ops.services.container import Services

router = APIRouter(prefix="/partners/applications", tags=["partners"])


@router.post("", response_model=PartnerApplicationOut, status_code=201)
def submit_application(body: PartnerApplicationCreate, services: Services = Depends(get_services)):
    return services.partners.submit_application(body)


@router.get("", response_model=list[PartnerApplicationOut])
def list_applications(status: Optional[str] = None, services: Services = Depends(get_services)):
    """Newest first, optionally only one status."""
    return services.partners.list_applications(status=status)


@router.patch("/{application_id}", response_model=PartnerApplicationOut)
def update_application(application_id: str, body: ApplicationStatusUpdate, services: Services = Depends(get_services)):
    return services.partners.update_status(application_id, body.status, user_id=body.user_id, user_name=body.user_name)
