import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.api.deps import get_current_user_id
from moodlogger.db.session import get_db
from moodlogger.schemas.survey import SurveyResponse, SurveySaveRequest
from moodlogger.services.survey import get_survey, normalize_conditions, save_survey, split_hobbies

router = APIRouter()


@router.get("", response_model=SurveyResponse)
async def get_my_survey(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    survey = await get_survey(db, user_id)
    if survey is None:
        return JSONResponse(status_code=404, content={"error": "Survey not completed."})
    return survey


@router.put("", response_model=SurveyResponse)
async def save_my_survey(
    request: SurveySaveRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Save the conditions and hobbies that personalize mood chat."""
    return await save_survey(
        db,
        user_id,
        conditions=normalize_conditions(request.conditions, request.other_text),
        hobbies=split_hobbies(request.hobbies),
    )
