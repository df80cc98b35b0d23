"""
Progress dashboard and learner profile endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException

from learnpath.config import get_settings
from learnpath.schemas.auth_schemas import LearnerContext
from learnpath.schemas.profile_schemas import ProfileResponse, UpdateProfileRequest
from learnpath.schemas.progress_schemas import DashboardResponse
from learnpath.services.dashboard import LearnerDashboard
from learnpath.services.record_store import SqlRecordStore, get_store
from learnpath.utils.auth import get_current_learner
from learnpath.utils.common import utcnow

dashboard_routes = APIRouter()


def _dashboard(learner: LearnerContext, store: SqlRecordStore) -> LearnerDashboard:
    return LearnerDashboard(learner, store, window_days=get_settings().WEEKLY_WINDOW_DAYS)


@dashboard_routes.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    learner: LearnerContext = Depends(get_current_learner),
    store: SqlRecordStore = Depends(get_store),
) -> DashboardResponse:
    """All-time totals, this week's activity and active courses."""
    dashboard = _dashboard(learner, store)
    if not await dashboard.load():
        raise HTTPException(status_code=503, detail="Progress is temporarily unavailable")
    return dashboard.summary(utcnow())


@dashboard_routes.get("/profile", response_model=ProfileResponse)
async def get_profile(
    learner: LearnerContext = Depends(get_current_learner),
    store: SqlRecordStore = Depends(get_store),
) -> ProfileResponse:
    profile = await store.fetch_profile(learner.user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@dashboard_routes.patch("/profile", response_model=ProfileResponse)
async def update_profile(
    body: UpdateProfileRequest,
    learner: LearnerContext = Depends(get_current_learner),
    store: SqlRecordStore = Depends(get_store),
) -> ProfileResponse:
    """
    Update the learner's profile (merge with existing).
    Use e.g. { "learning_style": "auditory" }.
    """
    changes = body.changes()
    if not changes:
        raise HTTPException(status_code=400, detail="No profile fields to update")
    dashboard = _dashboard(learner, store)
    dashboard.profile = await store.fetch_profile(learner.user_id)
    if dashboard.profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    result = await dashboard.update_profile(changes)
    if not result.ok:
        raise HTTPException(status_code=503, detail="Profile could not be saved")
    return dashboard.profile
