"""Referral short links, the redirect endpoint and the activity feed."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from luna_ops.api.deps import get_services
from luna_ops.models.referrals import ActivityOut, ReferralCreate, ReferralOut
from luna_ops.services.container import Services

router = APIRouter(tags=["referrals"])


@router.post("/referrals", response_model=ReferralOut, status_code=201)
def create_referral(body: ReferralCreate, services: Services = Depends(get_services)):
    return services.referrals.create_referral_link(body)


@router.get("/referrals", response_model=list[ReferralOut])
def list_referrals(marketer_id: str, services: Services = Depends(get_services)):
    return services.referrals.list_by_marketer(marketer_id)


@router.get("/r/{short_code}")
def follow_referral(short_code: str, services: Services = Depends(get_services)) -> RedirectResponse:
    """Count the click and redirect (307) to the destination."""
    link = services.referrals.get_and_track(short_code)
    return RedirectResponse(url=link.destination_url, status_code=307)


@router.get("/activities", response_model=list[ActivityOut])
def recent_activities(count: int = Query(50, ge=1, le=500), services: Services = Depends(get_services)):
    return services.activity.recent_activities(count)
