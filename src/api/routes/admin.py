"""
Admin / operations endpoints
============================

GET    /api/v1/admin/health           -- simple health check
GET    /api/v1/admin/surge            -- current surge state
PUT    /api/v1/admin/surge            -- activate surge with a multiplier
DELETE /api/v1/admin/surge            -- deactivate surge
PUT    /api/v1/admin/matching-policy  -- swap the matching policy by name
GET    /api/v1/admin/rides/completed  -- archived rides
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_dispatch
from src.api.middleware import limiter
from src.api.schemas import (
    HealthResponse,
    MatchingPolicyRequest,
    MatchingPolicyResponse,
    RideResponse,
    SurgeRequest,
    SurgeResponse,
)
from src.config import settings
from src.domain.matching import policy_from_name
from src.services.dispatch import DispatchService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/surge", response_model=SurgeResponse, summary="Current surge state")
async def get_surge(dispatch: DispatchService = Depends(get_dispatch)):
    return SurgeResponse.model_validate(dispatch.surge)


@router.put(
    "/surge",
    response_model=SurgeResponse,
    summary="Activate surge pricing",
    description="The multiplier must be positive; otherwise 422.",
)
@limiter.limit(settings.rate_limit)
async def activate_surge(
    request: Request,
    body: SurgeRequest,
    dispatch: DispatchService = Depends(get_dispatch),
):
    dispatch.activate_surge(body.multiplier)
    return SurgeResponse.model_validate(dispatch.surge)


@router.delete("/surge", response_model=SurgeResponse, summary="Deactivate surge pricing")
@limiter.limit(settings.rate_limit)
async def deactivate_surge(
    request: Request,
    dispatch: DispatchService = Depends(get_dispatch),
):
    dispatch.deactivate_surge()
    return SurgeResponse.model_validate(dispatch.surge)


@router.put(
    "/matching-policy",
    response_model=MatchingPolicyResponse,
    summary="Swap the matching policy",
)
@limiter.limit(settings.rate_limit)
async def set_matching_policy(
    request: Request,
    body: MatchingPolicyRequest,
    dispatch: DispatchService = Depends(get_dispatch),
):
    policy = policy_from_name(body.policy)
    dispatch.set_matching_policy(policy)
    return MatchingPolicyResponse(policy=policy.name)


@router.get(
    "/rides/completed",
    response_model=list[RideResponse],
    summary="List archived rides",
)
@limiter.limit(settings.rate_limit)
async def completed_rides(
    request: Request,
    dispatch: DispatchService = Depends(get_dispatch),
):
    return [RideResponse.from_domain(r) for r in dispatch.completed_rides()]


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
