"""
存储实例与依赖注入
"""
from app import config
from app.utils.persistence import QuestionsStore, SurveyResponseStore

# 数据存储 - 使用持久化
questions_store = QuestionsStore(config.DATA_DIR, config.QUESTIONS_FILE)
survey_response_store = SurveyResponseStore(config.DATA_DIR, config.RESPONSES_FILE)


def get_questions_store() -> QuestionsStore:
    """问题存储依赖，测试中可通过 dependency_overrides 替换"""
    return questions_store


def get_survey_response_store() -> SurveyResponseStore:
    """提交记录存储依赖"""
    return survey_response_store
