"""
测试问卷提交记录API
"""
import pytest

from app.utils.persistence import SurveyResponseStore


class FailingResponseStore(SurveyResponseStore):
    def save(self, data):
        return False


def _submission(**overrides):
    payload = {
        'userData': {'name': 'Ana Lima', 'email': 'ana@example.com', 'employeeId': 'E-100'},
        'answers': {'1': 2, '2': 5},
        'totalScore': 7,
        'percentage': 70,
    }
    payload.update(overrides)
    return payload


def test_list_is_empty_initially(client):
    response = client.get("/api/survey-responses")
    assert response.status_code == 200
    assert response.json() == []


def test_submit_stores_response_verbatim(client):
    payload = _submission(timestamp='2026-01-02T03:04:05.000Z')
    response = client.post("/api/survey-responses", json=payload)
    assert response.status_code == 200
    body = response.json()
    assert body['message'] == 'Survey response saved successfully'

    stored = client.get("/api/survey-responses").json()
    assert len(stored) == 1
    record = stored[0]
    assert record['id'] == body['id']
    assert record['userData'] == payload['userData']
    assert record['answers'] == payload['answers']
    assert record['totalScore'] == 7
    assert record['percentage'] == 70
    assert record['timestamp'] == '2026-01-02T03:04:05.000Z'
    assert record['submittedAt']


def test_submit_assigns_timestamp_when_absent(client):
    client.post("/api/survey-responses", json=_submission())
    record = client.get("/api/survey-responses").json()[0]
    assert record['timestamp'].endswith('Z')
    assert 'T' in record['timestamp']


def test_submit_ignores_unknown_fields(client):
    client.post("/api/survey-responses", json=_submission(extra='drop me'))
    record = client.get("/api/survey-responses").json()[0]
    assert 'extra' not in record


@pytest.mark.parametrize('field', ['userData', 'answers', 'totalScore', 'percentage'])
def test_submit_missing_field_is_rejected(client, survey_response_store, field):
    client.post("/api/survey-responses", json=_submission())
    payload = _submission()
    del payload[field]

    response = client.post("/api/survey-responses", json=payload)
    assert response.status_code == 400
    assert response.json() == {'error': 'Missing required fields'}
    assert len(survey_response_store.load()) == 1


def test_submit_accepts_explicit_zero_and_null_scores(client):
    assert client.post("/api/survey-responses", json=_submission(totalScore=0, percentage=0)).status_code == 200
    assert client.post("/api/survey-responses", json=_submission(totalScore=None)).status_code == 200


@pytest.mark.parametrize('overrides', [
    {'answers': {}},
    {'answers': []},
    {'userData': {}},
])
def test_submit_accepts_empty_objects_and_arrays(client, survey_response_store, overrides):
    response = client.post("/api/survey-responses", json=_submission(**overrides))
    assert response.status_code == 200

    record = survey_response_store.load()[0]
    for field, value in overrides.items():
        assert record[field] == value


@pytest.mark.parametrize('overrides', [
    {'userData': None},
    {'answers': None},
    {'answers': ''},
    {'answers': 0},
    {'answers': False},
])
def test_submit_null_or_falsy_scalar_is_rejected(client, survey_response_store, overrides):
    response = client.post("/api/survey-responses", json=_submission(**overrides))
    assert response.status_code == 400
    assert response.json() == {'error': 'Missing required fields'}
    assert not survey_response_store.exists()


def test_duplicate_check_by_employee_id(client):
    client.post("/api/survey-responses", json=_submission())
    client.post("/api/survey-responses", json=_submission())

    assert client.get("/api/survey-responses/employee/E-100").json() == {'taken': True}
    assert client.get("/api/survey-responses/employee/E-999").json() == {'taken': False}
    # 兼容旧路径
    assert client.get("/api/survey-responses/E-100").json() == {'taken': True}
    assert client.get("/api/survey-responses/E-999").json() == {'taken': False}


def test_duplicate_check_matches_numeric_employee_id(client, survey_response_store):
    survey_response_store.save([
        {'id': 1, 'userData': {'name': 'N', 'email': 'e', 'employeeId': 42}},
        {'id': 2},
        {'id': 3, 'userData': None},
    ])
    assert client.get("/api/survey-responses/employee/42").json() == {'taken': True}
    assert client.get("/api/survey-responses/employee/43").json() == {'taken': False}


def test_delete_single_response(client):
    first = client.post("/api/survey-responses", json=_submission()).json()['id']
    second = client.post("/api/survey-responses", json=_submission()).json()['id']
    assert first != second

    response = client.delete(f"/api/survey-responses/{first}")
    assert response.status_code == 200
    assert response.json() == {'message': 'Survey response deleted successfully'}
    assert [r['id'] for r in client.get("/api/survey-responses").json()] == [second]


def test_delete_missing_response_returns_404(client):
    response = client.delete("/api/survey-responses/99")
    assert response.status_code == 404
    assert response.json() == {'error': 'Survey response not found'}


def test_bulk_delete_responses(client, survey_response_store):
    survey_response_store.save([{'id': 1}, {'id': 2}, {'id': 3}])

    response = client.request("DELETE", "/api/survey-responses", json={'ids': [1, 3, 5]})
    assert response.status_code == 200
    assert response.json() == {'message': 'Survey responses deleted successfully'}
    assert survey_response_store.load() == [{'id': 2}]


def test_bulk_delete_with_no_matches_still_persists(client, survey_response_store):
    response = client.request("DELETE", "/api/survey-responses", json={'ids': []})
    assert response.status_code == 200
    assert survey_response_store.exists()
    assert survey_response_store.load() == []


def test_bulk_delete_requires_list(client):
    response = client.request("DELETE", "/api/survey-responses", json={'ids': 5})
    assert response.status_code == 400
    assert response.json() == {'error': 'Invalid request format'}


def test_write_failures_return_500(client, tmp_path):
    from app.main import app
    from app.storage import get_survey_response_store

    failing = FailingResponseStore(str(tmp_path), 'responses.json')
    app.dependency_overrides[get_survey_response_store] = lambda: failing

    response = client.post("/api/survey-responses", json=_submission())
    assert response.status_code == 500
    assert response.json() == {'error': 'Failed to save survey response'}
    assert client.request("DELETE", "/api/survey-responses", json={'ids': [1]}).status_code == 500


def test_delete_single_response_save_failure_keeps_file(client, tmp_path, survey_response_store):
    from app.main import app
    from app.storage import get_survey_response_store

    response_id = client.post("/api/survey-responses", json=_submission()).json()['id']
    before = survey_response_store.filepath.read_text(encoding='utf-8')

    failing = FailingResponseStore(str(tmp_path), 'responses.json')
    app.dependency_overrides[get_survey_response_store] = lambda: failing

    response = client.delete(f"/api/survey-responses/{response_id}")
    assert response.status_code == 500
    assert response.json() == {'error': 'Failed to delete survey response'}
    assert survey_response_store.filepath.read_text(encoding='utf-8') == before
