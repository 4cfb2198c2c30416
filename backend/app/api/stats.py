"""
问卷统计API
"""
from fastapi import APIRouter, Depends, HTTPException
import logging

from app.storage import get_questions_store, get_survey_response_store
from app.utils.persistence import QuestionsStore, SurveyResponseStore
from app.utils.response_analyzer import get_basic_statistics

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/stats")
def get_survey_stats(
    questions_store: QuestionsStore = Depends(get_questions_store),
    response_store: SurveyResponseStore = Depends(get_survey_response_store)
):
    """获取题目数量、提交数量及得分分布"""
    try:
        data = questions_store.load()
        responses = response_store.load()
        return get_basic_statistics(data['questions'], responses)
    except Exception:
        logger.exception("统计计算失败")
        raise HTTPException(status_code=500, detail='Failed to compute statistics')
