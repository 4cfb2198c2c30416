"""
问卷提交记录API
支持：提交、列表、按员工编号查重、单个/批量删除
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import Any, Dict, List
from datetime import datetime
import logging

from app.models.survey import BulkDeleteRequest, SurveyResponseSubmitRequest
from app.storage import get_survey_response_store
from app.utils.persistence import SurveyResponseStore
from app.utils.timestamps import utc_iso_now

router = APIRouter()
logger = logging.getLogger(__name__)


def _is_employee_taken(responses: List[Dict[str, Any]], employee_id: str) -> bool:
    """线性扫描所有提交记录，判断该员工编号是否已提交过"""
    for response in responses:
        user_data = response.get('userData') if isinstance(response, dict) else None
        if not isinstance(user_data, dict):
            continue
        stored_id = user_data.get('employeeId')
        if stored_id is not None and str(stored_id) == employee_id:
            return True
    return False


@router.get("/survey-responses")
def list_survey_responses(store: SurveyResponseStore = Depends(get_survey_response_store)):
    """获取全部提交记录"""
    try:
        responses = store.load()
        logger.info("已加载 %s 条提交记录", len(responses))
        return responses
    except Exception:
        logger.exception("读取提交记录失败")
        raise HTTPException(status_code=500, detail='Failed to read survey responses')


@router.post("/survey-responses")
def submit_survey_response(
    request: SurveyResponseSubmitRequest,
    store: SurveyResponseStore = Depends(get_survey_response_store)
):
    """
    保存一条问卷提交

    userData、answers、totalScore、percentage 为必填；
    timestamp 缺省时使用服务器当前时间，submittedAt 总是由服务器生成。
    """
    missing = request.missing_fields()
    if missing:
        logger.warning("提交缺少必填字段: %s", missing)
        raise HTTPException(status_code=400, detail='Missing required fields')

    try:
        with store.locked():
            responses = store.load()
            new_response = {
                'id': store.next_id(responses),
                'userData': request.user_data,
                'answers': request.answers,
                'totalScore': request.total_score,
                'percentage': request.percentage,
                'timestamp': request.timestamp or utc_iso_now(),
                'submittedAt': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
            }
            responses.append(new_response)

            if not store.save(responses):
                raise HTTPException(status_code=500, detail='Failed to save survey response')

        logger.info(
            "已保存提交: id=%s name=%s score=%s percentage=%s",
            new_response['id'], request.user_data.get('name'),
            request.total_score, request.percentage
        )
        return {'message': 'Survey response saved successfully', 'id': new_response['id']}
    except HTTPException:
        raise
    except Exception:
        logger.exception("保存提交失败")
        raise HTTPException(status_code=500, detail='Failed to save survey response')


@router.delete("/survey-responses")
def delete_survey_responses(
    request: BulkDeleteRequest,
    store: SurveyResponseStore = Depends(get_survey_response_store)
):
    """批量删除提交记录，即使没有匹配项也会重写文件"""
    try:
        with store.locked():
            responses = store.load()
            remaining = [
                r for r in responses
                if not (isinstance(r, dict) and r.get('id') in request.ids)
            ]
            if not store.save(remaining):
                raise HTTPException(status_code=500, detail='Failed to delete survey responses')

        logger.info("批量删除 %s 条提交记录", len(responses) - len(remaining))
        return {'message': 'Survey responses deleted successfully'}
    except HTTPException:
        raise
    except Exception:
        logger.exception("批量删除提交记录失败")
        raise HTTPException(status_code=500, detail='Failed to delete survey responses')


@router.get("/survey-responses/employee/{employee_id}")
def check_employee_submission(
    employee_id: str,
    store: SurveyResponseStore = Depends(get_survey_response_store)
):
    """查询该员工编号是否已提交过问卷"""
    try:
        return {'taken': _is_employee_taken(store.load(), employee_id)}
    except Exception:
        logger.exception("查重失败: employeeId=%s", employee_id)
        raise HTTPException(status_code=500, detail='Error checking employee ID')


# 兼容旧客户端: GET 按员工编号查重, DELETE 按记录ID删除
router.add_api_route(
    "/survey-responses/{employee_id}",
    check_employee_submission,
    methods=["GET"],
    name="check_employee_submission_legacy",
)


@router.delete("/survey-responses/{response_id}")
def delete_survey_response(
    response_id: int,
    store: SurveyResponseStore = Depends(get_survey_response_store)
):
    """删除单条提交记录"""
    try:
        with store.locked():
            responses = store.load()
            index = next(
                (i for i, r in enumerate(responses) if isinstance(r, dict) and r.get('id') == response_id),
                -1
            )
            if index == -1:
                logger.warning("提交记录不存在: id=%s", response_id)
                raise HTTPException(status_code=404, detail='Survey response not found')

            deleted = responses.pop(index)
            if not store.save(responses):
                raise HTTPException(status_code=500, detail='Failed to delete survey response')

        user_data = deleted.get('userData') or {}
        logger.info("已删除提交记录: id=%s name=%s", response_id,
                    user_data.get('name') if isinstance(user_data, dict) else None)
        return {'message': 'Survey response deleted successfully'}
    except HTTPException:
        raise
    except Exception:
        logger.exception("删除提交记录失败: id=%s", response_id)
        raise HTTPException(status_code=500, detail='Failed to delete survey response')
