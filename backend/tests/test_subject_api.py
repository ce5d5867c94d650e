from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from grading_system.config import settings
from grading_system.main import app
from grading_system.repositories import SubjectRepository

client = TestClient(app)

ALERT = f'X-{settings.APP_NAME}-alert'
PARAMS = f'X-{settings.APP_NAME}-params'
ERROR = f'X-{settings.APP_NAME}-error'


def _create(name='Math', code='MTH'):
    r = client.post('/api/subjects', json={'name': name, 'code': code})
    assert r.status_code == 201
    return r.json()


def test_create_subject():
    r = client.post('/api/subjects', json={'name': 'Math', 'code': 'MTH'})
    assert r.status_code == 201
    assert r.json() == {'id': 1, 'name': 'Math', 'code': 'MTH'}
    assert r.headers['Location'] == '/api/subjects/1'
    assert r.headers[ALERT] == 'A new subject is created with identifier 1'
    assert r.headers[PARAMS] == '1'


def test_create_with_id_is_rejected():
    r = client.post('/api/subjects', json={'id': 5, 'name': 'Math', 'code': 'MTH'})
    assert r.status_code == 400
    body = r.json()
    assert body['errorKey'] == 'idexists'
    assert body['entityName'] == 'subject'
    assert body['message'] == 'error.idexists'
    assert body['detail'] == 'A new subject cannot already have an ID'
    assert r.headers['content-type'].startswith('application/problem+json')
    assert r.headers[ERROR] == 'error.idexists'
    assert r.headers[PARAMS] == 'subject'
    assert client.get('/api/subjects').json() == []


def test_update_subject():
    created = _create()
    r = client.put(f"/api/subjects/{created['id']}", json={'id': created['id'], 'name': 'Mathematics', 'code': 'MAT'})
    assert r.status_code == 200
    assert r.json() == {'id': created['id'], 'name': 'Mathematics', 'code': 'MAT'}
    assert r.headers[ALERT] == f"A subject is updated with identifier {created['id']}"
    assert client.get(f"/api/subjects/{created['id']}").json()['name'] == 'Mathematics'


def test_update_unknown_id_is_bad_request():
    r = client.put('/api/subjects/1', json={'id': 1, 'name': 'Math', 'code': 'MTH'})
    assert r.status_code == 400
    assert r.json()['errorKey'] == 'idnotfound'
    # the existence check must stop update from creating the row
    assert client.get('/api/subjects').json() == []


def test_update_requires_body_id():
    created = _create()
    r = client.put(f"/api/subjects/{created['id']}", json={'name': 'Math'})
    assert r.status_code == 400
    assert r.json()['errorKey'] == 'idnull'


def test_update_rejects_mismatched_ids():
    created = _create()
    r = client.put(f"/api/subjects/{created['id']}", json={'id': created['id'] + 1, 'name': 'Math'})
    assert r.status_code == 400
    assert r.json()['errorKey'] == 'idinvalid'


def test_partial_update_merges():
    created = _create('Math', 'MTH')
    r = client.patch(f"/api/subjects/{created['id']}", json={'id': created['id'], 'name': 'Algebra'})
    assert r.status_code == 200
    assert r.json() == {'id': created['id'], 'name': 'Algebra', 'code': 'MTH'}
    assert r.headers[ALERT] == f"A subject is updated with identifier {created['id']}"


def test_partial_update_accepts_merge_patch_json():
    created = _create('Math', 'MTH')
    r = client.patch(
        f"/api/subjects/{created['id']}",
        content=f'{{"id": {created["id"]}, "code": "ALG"}}',
        headers={'Content-Type': 'application/merge-patch+json'},
    )
    assert r.status_code == 200
    assert r.json() == {'id': created['id'], 'name': 'Math', 'code': 'ALG'}


def test_partial_update_validation_errors():
    created = _create()
    assert client.patch(f"/api/subjects/{created['id']}", json={'name': 'x'}).json()['errorKey'] == 'idnull'
    assert client.patch(f"/api/subjects/{created['id']}", json={'id': 77}).json()['errorKey'] == 'idinvalid'
    r = client.patch('/api/subjects/77', json={'id': 77, 'name': 'x'})
    assert r.status_code == 400
    assert r.json()['errorKey'] == 'idnotfound'


def test_partial_update_not_found_when_row_vanishes(monkeypatch):
    created = _create()
    monkeypatch.setattr(SubjectRepository, 'find_by_id', lambda self, subject_id: None)
    r = client.patch(f"/api/subjects/{created['id']}", json={'id': created['id'], 'name': 'x'})
    assert r.status_code == 404
    assert r.json()['status'] == 404


def test_get_all_in_storage_order():
    first = _create('Math', 'MTH')
    second = _create('History', 'HIS')
    r = client.get('/api/subjects')
    assert r.status_code == 200
    assert r.json() == [first, second]


def test_get_one_and_missing():
    created = _create()
    r = client.get(f"/api/subjects/{created['id']}")
    assert r.status_code == 200
    assert r.json() == created
    missing = client.get('/api/subjects/999')
    assert missing.status_code == 404
    assert missing.json()['message'] == 'error.http.404'


def test_non_integer_id_is_rejected_by_validation():
    assert client.get('/api/subjects/abc').status_code == 422


def test_out_of_range_ids_are_rejected_by_validation():
    too_big = 2 ** 63
    assert client.get(f'/api/subjects/{too_big}').status_code == 422
    assert client.delete(f'/api/subjects/{too_big}').status_code == 422
    assert client.put(f'/api/subjects/{too_big}', json={'id': too_big, 'name': 'x'}).status_code == 422
    assert client.patch(f'/api/subjects/{too_big}', json={'id': too_big, 'name': 'x'}).status_code == 422
    assert client.get(f'/api/subjects/{-too_big - 1}').status_code == 422
    assert client.post('/api/subjects', json={'id': too_big, 'name': 'x'}).status_code == 422
    created = _create()
    r = client.put(f"/api/subjects/{created['id']}", json={'id': too_big, 'name': 'x'})
    assert r.status_code == 422


def test_largest_id_is_accepted():
    largest = 2 ** 63 - 1
    assert client.get(f'/api/subjects/{largest}').status_code == 404
    assert client.delete(f'/api/subjects/{largest}').status_code == 204


def test_delete_is_idempotent():
    created = _create()
    r = client.delete(f"/api/subjects/{created['id']}")
    assert r.status_code == 204
    assert r.content == b''
    assert r.headers[ALERT] == f"A subject is deleted with identifier {created['id']}"
    assert client.get(f"/api/subjects/{created['id']}").status_code == 404
    assert client.delete(f"/api/subjects/{created['id']}").status_code == 204


def test_storage_failure_is_opaque_500(monkeypatch):
    def boom(self):
        raise OperationalError('SELECT', {}, Exception('database is locked'))

    monkeypatch.setattr(SubjectRepository, 'find_all', boom)
    failing_client = TestClient(app, raise_server_exceptions=False)
    r = failing_client.get('/api/subjects', headers={'X-Request-ID': 'req-500'})
    assert r.status_code == 500
    body = r.json()
    assert body['message'] == 'error.http.500'
    assert 'locked' not in r.text
    assert r.headers['X-Request-ID'] == 'req-500'
    assert failing_client.get('/api/subjects').headers.get('X-Request-ID')


def test_request_id_is_echoed():
    r = client.get('/api/subjects', headers={'X-Request-ID': 'abc123'})
    assert r.headers['X-Request-ID'] == 'abc123'


def test_health():
    assert client.get('/health').json() == {'status': 'ok'}


def test_request_id_is_generated_when_missing():
    r = client.get('/api/subjects')
    assert len(r.headers['X-Request-ID']) == 32
