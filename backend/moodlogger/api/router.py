from fastapi import APIRouter

from moodlogger.api.v1 import (
    achievements,
    catalog,
    chat,
    health,
    journal,
    meditation,
    moods,
    survey,
    therapy,
)

api_router = APIRouter(prefix="/v1")

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(chat.router, tags=["Chat"])
api_router.include_router(moods.router, prefix="/moods", tags=["Moods"])
api_router.include_router(journal.router, prefix="/journal", tags=["Journal"])
api_router.include_router(achievements.router, prefix="/achievements", tags=["Achievements"])
api_router.include_router(meditation.router, prefix="/meditation", tags=["Meditation"])
api_router.include_router(therapy.router, prefix="/therapy", tags=["Therapy"])
api_router.include_router(survey.router, prefix="/survey", tags=["Survey"])
api_router.include_router(catalog.router, tags=["Resources"])
