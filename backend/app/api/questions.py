"""
问卷题目管理API
支持：题目增删改、批量删除、整体文档替换、回答配置合并
"""
from fastapi import APIRouter, Body, Depends, HTTPException
from typing import Any, Dict, List
import logging

from app.models.survey import DEFAULT_OPTIONS, BulkDeleteRequest, QuestionRequest
from app.storage import get_questions_store
from app.utils.persistence import QuestionsStore

router = APIRouter()
logger = logging.getLogger(__name__)


def _find_question_index(questions: List[Dict[str, Any]], question_id: int) -> int:
    for index, question in enumerate(questions):
        if isinstance(question, dict) and question.get('id') == question_id:
            return index
    return -1


def _build_options(request: QuestionRequest) -> List[Dict[str, Any]]:
    if request.options is None:
        return [dict(option) for option in DEFAULT_OPTIONS]
    # 客户端选项原样保存，包括额外字段
    return [dict(option) for option in request.options]


# ========== 文档级API ==========

@router.get("/data")
def get_survey_data(store: QuestionsStore = Depends(get_questions_store)):
    """获取全部题目和回答配置"""
    try:
        data = store.load()
        logger.info("返回 %s 道题目", len(data['questions']))
        return data
    except Exception:
        logger.exception("读取题目文档失败")
        raise HTTPException(status_code=500, detail='Failed to read data')


@router.post("/data")
def save_survey_data(
    data: Dict[str, Any] = Body(...),
    store: QuestionsStore = Depends(get_questions_store)
):
    """
    整体替换题目文档
    不合并、不校验内部结构，原样覆盖
    """
    try:
        with store.locked():
            if not store.save(data):
                raise HTTPException(status_code=500, detail='Failed to save data')
        logger.info("题目文档已整体替换")
        return {'message': 'Data saved successfully'}
    except HTTPException:
        raise
    except Exception:
        logger.exception("替换题目文档失败")
        raise HTTPException(status_code=500, detail='Failed to save data')


# ========== 题目API ==========

@router.post("/questions")
def create_question(
    request: QuestionRequest,
    store: QuestionsStore = Depends(get_questions_store)
):
    """新增题目，未提供选项时使用默认五级量表"""
    try:
        with store.locked():
            data = store.load()
            new_question = {
                'id': store.next_id(data['questions']),
                'text': request.text,
                'options': _build_options(request),
            }
            data['questions'].append(new_question)

            if not store.save(data):
                raise HTTPException(status_code=500, detail='Failed to save question')

        logger.info('新增题目: id=%s text="%s"', new_question['id'], request.text[:50])
        return new_question
    except HTTPException:
        raise
    except Exception:
        logger.exception("新增题目失败")
        raise HTTPException(status_code=500, detail='Failed to add question')


@router.put("/questions/{question_id}")
def update_question(
    question_id: int,
    request: QuestionRequest,
    store: QuestionsStore = Depends(get_questions_store)
):
    """更新题目文本和选项，ID保持不变"""
    try:
        with store.locked():
            data = store.load()
            index = _find_question_index(data['questions'], question_id)
            if index == -1:
                logger.warning("题目不存在: id=%s", question_id)
                raise HTTPException(status_code=404, detail='Question not found')

            question = data['questions'][index]
            question['text'] = request.text
            if request.options is not None:
                question['options'] = _build_options(request)

            if not store.save(data):
                raise HTTPException(status_code=500, detail='Failed to update question')

        logger.info("题目已更新: id=%s", question_id)
        return question
    except HTTPException:
        raise
    except Exception:
        logger.exception("更新题目失败: id=%s", question_id)
        raise HTTPException(status_code=500, detail='Failed to update question')


@router.delete("/questions/{question_id}")
def delete_question(
    question_id: int,
    store: QuestionsStore = Depends(get_questions_store)
):
    """删除单个题目"""
    try:
        with store.locked():
            data = store.load()
            index = _find_question_index(data['questions'], question_id)
            if index == -1:
                logger.warning("题目不存在: id=%s", question_id)
                raise HTTPException(status_code=404, detail='Question not found')

            deleted = data['questions'].pop(index)
            if not store.save(data):
                raise HTTPException(status_code=500, detail='Failed to delete question')

        logger.info('已删除题目: "%s"', str(deleted.get('text', ''))[:50])
        return {'message': 'Question deleted successfully'}
    except HTTPException:
        raise
    except Exception:
        logger.exception("删除题目失败: id=%s", question_id)
        raise HTTPException(status_code=500, detail='Failed to delete question')


@router.delete("/questions")
def delete_questions(
    request: BulkDeleteRequest,
    store: QuestionsStore = Depends(get_questions_store)
):
    """批量删除题目，不存在的ID直接忽略"""
    try:
        with store.locked():
            data = store.load()
            original_count = len(data['questions'])
            data['questions'] = [
                q for q in data['questions']
                if not (isinstance(q, dict) and q.get('id') in request.ids)
            ]
            if not store.save(data):
                raise HTTPException(status_code=500, detail='Failed to delete questions')

        logger.info("批量删除 %s 道题目", original_count - len(data['questions']))
        return {'message': 'Questions deleted successfully'}
    except HTTPException:
        raise
    except Exception:
        logger.exception("批量删除题目失败")
        raise HTTPException(status_code=500, detail='Failed to delete questions')


# ========== 回答配置API ==========

@router.post("/responses")
def update_response_config(
    config: Dict[str, Any] = Body(...),
    store: QuestionsStore = Depends(get_questions_store)
):
    """浅合并回答配置：同名键覆盖，其余键保留"""
    try:
        with store.locked():
            data = store.load()
            data['responses'] = {**data['responses'], **config}
            if not store.save(data):
                raise HTTPException(status_code=500, detail='Failed to update responses')

        logger.info("回答配置已更新: keys=%s", list(config.keys()))
        return {'message': 'Responses updated successfully'}
    except HTTPException:
        raise
    except Exception:
        logger.exception("更新回答配置失败")
        raise HTTPException(status_code=500, detail='Failed to update responses')
