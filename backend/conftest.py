import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.storage import get_questions_store, get_survey_response_store
from app.utils.persistence import QuestionsStore, SurveyResponseStore


@pytest.fixture
def questions_store(tmp_path):
    return QuestionsStore(str(tmp_path), 'data.json')


@pytest.fixture
def survey_response_store(tmp_path):
    return SurveyResponseStore(str(tmp_path), 'responses.json')


@pytest.fixture
def client(questions_store, survey_response_store):
    # 用临时目录中的存储替换全局存储
    app.dependency_overrides[get_questions_store] = lambda: questions_store
    app.dependency_overrides[get_survey_response_store] = lambda: survey_response_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
