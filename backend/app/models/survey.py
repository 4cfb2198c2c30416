"""
问卷管理数据模型
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


# 未提供选项时使用的五级量表
DEFAULT_OPTIONS: List[Dict[str, Any]] = [
    {'text': 'Strongly aligns with me', 'score': 1},
    {'text': 'Somewhat aligns with me', 'score': 2},
    {'text': 'Neutral or unsure', 'score': 3},
    {'text': 'Somewhat misaligned with me', 'score': 4},
    {'text': 'Strongly misaligned with me', 'score': 5},
]


def _is_blank(value: Any) -> bool:
    """None 或空字符串/0/False 视为未提供；空对象和空数组视为已提供"""
    if value is None:
        return True
    if isinstance(value, (dict, list)):
        return False
    return not value


class QuestionRequest(BaseModel):
    """新增/更新问题请求"""
    text: str = Field(..., description="问题文本")
    options: Optional[List[Dict[str, Any]]] = Field(
        None, description="选项列表（{text, score, ...}，原样保存），缺省时使用五级量表"
    )


class BulkDeleteRequest(BaseModel):
    """批量删除请求"""
    ids: List[Any] = Field(..., description="待删除记录的ID列表")


class SurveyResponseSubmitRequest(BaseModel):
    """问卷提交请求

    answers 和 userData 原样保存，不解析其内容。
    """
    model_config = ConfigDict(populate_by_name=True)

    user_data: Optional[Dict[str, Any]] = Field(None, alias='userData', description="填写人信息")
    answers: Any = Field(None, description="答案")
    total_score: Any = Field(None, alias='totalScore', description="总分")
    percentage: Any = Field(None, description="得分百分比")
    timestamp: Any = Field(None, description="客户端提交时间(ISO格式)")

    def missing_fields(self) -> List[str]:
        """返回缺失的必填字段；totalScore/percentage 显式传 null 视为已提供"""
        missing = []
        if _is_blank(self.user_data):
            missing.append('userData')
        if _is_blank(self.answers):
            missing.append('answers')
        if 'total_score' not in self.model_fields_set:
            missing.append('totalScore')
        if 'percentage' not in self.model_fields_set:
            missing.append('percentage')
        return missing
