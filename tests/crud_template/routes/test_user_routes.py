import pytest
from fastapi.testclient import TestClient

from crud_template.auth import jwt_handler
from crud_template.auth.passwords import verify_password
from crud_template.core import config
from crud_template.database import get_db
from crud_template.main import app
from crud_template.models.user import User, UserRole
from crud_template.routes import user_routes

DEFAULT_PASSWORD = 'password123'
USERS_URL = '/api/users'


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def admin(make_user) -> User:
    return make_user('admin@example.com', name='Admin', role=UserRole.ADMINISTRATOR)


@pytest.fixture
def customer(make_user) -> User:
    return make_user('client@example.com', name='Client', role=UserRole.CLIENT)


def _auth_headers(user: User) -> dict:
    return {'Authorization': f'Bearer {jwt_handler.create_access_token(user)}'}


def _user_payload(**overrides) -> dict:
    payload = {'name': 'New User', 'email': 'new.user@example.com', 'password': 'password1'}
    payload.update(overrides)
    return payload


def test_register_creates_client_with_hashed_password(client, db_session) -> None:
    response = client.post(f'{USERS_URL}/register', json={'name': 'A', 'email': 'a@x.com', 'password': 'password1'})

    assert response.status_code == 201
    body = response.json()
    assert body['role'] == 'Client'
    assert body['password'] != 'password1'
    assert verify_password('password1', body['password'])
    assert response.headers['location'] == f"{USERS_URL}/{body['id']}"
    assert db_session.get(User, body['id']).email == 'a@x.com'


def test_register_ignores_requested_role(client) -> None:
    response = client.post(f'{USERS_URL}/register', json=_user_payload(role='Administrator'))

    assert response.status_code == 201
    assert response.json()['role'] == 'Client'


@pytest.mark.parametrize('payload', [
    _user_payload(password='short'),
    _user_payload(email='not-an-email'),
    _user_payload(name=''),
    _user_payload(name='x' * 101),
    {'email': 'missing.name@example.com', 'password': 'password1'},
])
def test_register_rejects_invalid_payloads_with_400(client, payload: dict) -> None:
    response = client.post(f'{USERS_URL}/register', json=payload)

    assert response.status_code == 400
    assert 'message' in response.json()


def test_register_duplicate_email_is_rejected(client, customer) -> None:
    response = client.post(f'{USERS_URL}/register', json=_user_payload(email='client@example.com'))

    assert response.status_code == 409
    assert 'message' in response.json()


def test_login_returns_token_for_valid_credentials(client, customer) -> None:
    response = client.post(f'{USERS_URL}/login', json={'email': 'client@example.com', 'password': DEFAULT_PASSWORD})

    assert response.status_code == 200
    claims = jwt_handler.decode_access_token(response.json()['token'])
    assert claims['sub'] == str(customer.id)
    assert claims['name'] == 'Client'
    assert claims['email'] == 'client@example.com'
    assert claims['role'] == 'Client'
    assert claims['exp'] - claims['iat'] == 8 * 60 * 60


def test_login_with_wrong_password_returns_401(client, customer) -> None:
    response = client.post(f'{USERS_URL}/login', json={'email': 'client@example.com', 'password': 'wrong-password'})

    assert response.status_code == 401
    assert response.json() == {'message': user_routes.INVALID_CREDENTIALS_MESSAGE}


def test_login_with_unknown_email_returns_401(client) -> None:
    response = client.post(f'{USERS_URL}/login', json={'email': 'ghost@example.com', 'password': DEFAULT_PASSWORD})

    assert response.status_code == 401


def test_login_unexpected_failure_returns_500(client, monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_authenticate(self, email, password):
        raise RuntimeError('token backend unavailable')

    monkeypatch.setattr(user_routes.UserService, 'authenticate', broken_authenticate)
    monkeypatch.setattr(config, 'EXPOSE_ERROR_DETAILS', False)

    response = client.post(f'{USERS_URL}/login', json={'email': 'a@example.com', 'password': DEFAULT_PASSWORD})

    assert response.status_code == 500
    assert response.json() == {'message': 'An unexpected error occurred.'}


def test_list_requires_authentication(client) -> None:
    response = client.get(USERS_URL)

    assert response.status_code == 401
    assert response.headers['www-authenticate'] == 'Bearer'


def test_list_rejects_clients(client, customer) -> None:
    response = client.get(USERS_URL, headers=_auth_headers(customer))

    assert response.status_code == 403


def test_list_paginates_for_administrators(client, admin, make_user) -> None:
    for index in range(4):
        make_user(f'client{index}@example.com')

    response = client.get(USERS_URL, params={'page': 2, 'pageSize': 2}, headers=_auth_headers(admin))

    assert response.status_code == 200
    body = response.json()
    assert body['current_page'] == 2
    assert body['page_size'] == 2
    assert body['total_count'] == 5
    assert [item['email'] for item in body['items']] == ['client1@example.com', 'client2@example.com']


def test_list_far_past_the_end_returns_empty_page(client, admin) -> None:
    response = client.get(USERS_URL, params={'page': 2**64, 'pageSize': 2**64}, headers=_auth_headers(admin))

    assert response.status_code == 200
    body = response.json()
    assert body['items'] == []
    assert body['total_count'] == 1


def test_list_uses_default_pagination(client, admin) -> None:
    body = client.get(USERS_URL, headers=_auth_headers(admin)).json()

    assert body['current_page'] == 1
    assert body['page_size'] == 10


@pytest.mark.parametrize('params', [{'page': 0}, {'pageSize': 0}, {'page': -1, 'pageSize': 5}])
def test_list_rejects_invalid_pagination(client, admin, params: dict) -> None:
    response = client.get(USERS_URL, params=params, headers=_auth_headers(admin))

    assert response.status_code == 400
    assert 'greater than or equal to 1' in response.json()['message']


def test_get_by_id_allows_any_authenticated_user(client, admin, customer) -> None:
    response = client.get(f'{USERS_URL}/{admin.id}', headers=_auth_headers(customer))

    assert response.status_code == 200
    assert response.json()['email'] == 'admin@example.com'


def test_get_by_id_requires_authentication(client, admin) -> None:
    assert client.get(f'{USERS_URL}/{admin.id}').status_code == 401


@pytest.mark.parametrize('entity_id', [0, -1])
def test_get_by_id_rejects_non_positive_ids(client, customer, entity_id: int) -> None:
    response = client.get(f'{USERS_URL}/{entity_id}', headers=_auth_headers(customer))

    assert response.status_code == 400


def test_get_by_id_returns_404_for_missing_user(client, customer) -> None:
    response = client.get(f'{USERS_URL}/999', headers=_auth_headers(customer))

    assert response.status_code == 404
    assert response.json() == {'message': 'User with ID 999 was not found.'}


def test_get_by_id_beyond_id_range_returns_404(client, customer) -> None:
    response = client.get(f'{USERS_URL}/{2**64}', headers=_auth_headers(customer))

    assert response.status_code == 404
    assert response.json() == {'message': f'User with ID {2**64} was not found.'}


def test_get_by_id_rejects_non_integer_ids(client, customer) -> None:
    assert client.get(f'{USERS_URL}/abc', headers=_auth_headers(customer)).status_code == 400


def test_rejects_tampered_token(client, customer) -> None:
    headers = {'Authorization': _auth_headers(customer)['Authorization'] + 'x'}

    assert client.get(f'{USERS_URL}/{customer.id}', headers=headers).status_code == 401


def test_admin_create_forces_administrator_role(client, admin) -> None:
    response = client.post(USERS_URL, json=_user_payload(role='Client'), headers=_auth_headers(admin))

    assert response.status_code == 201
    body = response.json()
    assert body['role'] == 'Administrator'
    assert verify_password('password1', body['password'])
    assert response.headers['location'] == f"{USERS_URL}/{body['id']}"


def test_create_rejects_clients(client, customer) -> None:
    response = client.post(USERS_URL, json=_user_payload(), headers=_auth_headers(customer))

    assert response.status_code == 403


def test_create_duplicate_email_is_rejected(client, admin) -> None:
    response = client.post(USERS_URL, json=_user_payload(email='admin@example.com'), headers=_auth_headers(admin))

    assert response.status_code == 409


def test_update_uses_id_from_url(client, admin, customer, db_session) -> None:
    payload = _user_payload(id=admin.id, name='Renamed', email='renamed@example.com', role='Client')

    response = client.put(f'{USERS_URL}/{customer.id}', json=payload, headers=_auth_headers(admin))

    assert response.status_code == 200
    assert response.json()['id'] == customer.id
    db_session.expire_all()
    assert db_session.get(User, customer.id).name == 'Renamed'
    assert db_session.get(User, admin.id).name == 'Admin'


def test_update_rehashes_password_on_every_call(client, admin, customer, db_session) -> None:
    payload = _user_payload(email='client@example.com', role='Client')

    stored_hashes = []
    for _ in range(2):
        response = client.put(f'{USERS_URL}/{customer.id}', json=payload, headers=_auth_headers(admin))
        assert response.status_code == 200
        db_session.expire_all()
        stored_hashes.append(db_session.get(User, customer.id).password)

    assert stored_hashes[0] != stored_hashes[1]
    assert all(verify_password('password1', stored) for stored in stored_hashes)


def test_update_requires_role(client, admin, customer) -> None:
    response = client.put(f'{USERS_URL}/{customer.id}', json=_user_payload(), headers=_auth_headers(admin))

    assert response.status_code == 400


def test_update_missing_user_returns_404(client, admin) -> None:
    response = client.put(f'{USERS_URL}/999', json=_user_payload(role='Client'), headers=_auth_headers(admin))

    assert response.status_code == 404


def test_update_beyond_id_range_returns_404(client, admin) -> None:
    response = client.put(f'{USERS_URL}/{2**64}', json=_user_payload(role='Client'), headers=_auth_headers(admin))

    assert response.status_code == 404


def test_update_rejects_clients(client, customer) -> None:
    response = client.put(
        f'{USERS_URL}/{customer.id}', json=_user_payload(role='Client'), headers=_auth_headers(customer)
    )

    assert response.status_code == 403


def test_delete_removes_user(client, admin, customer, db_session) -> None:
    customer_id = customer.id

    response = client.delete(f'{USERS_URL}/{customer_id}', headers=_auth_headers(admin))

    assert response.status_code == 204
    assert response.content == b''
    db_session.expire_all()
    assert db_session.get(User, customer_id) is None


def test_delete_missing_user_returns_404(client, admin) -> None:
    assert client.delete(f'{USERS_URL}/999', headers=_auth_headers(admin)).status_code == 404


def test_delete_beyond_id_range_returns_404(client, admin) -> None:
    assert client.delete(f'{USERS_URL}/{2**64}', headers=_auth_headers(admin)).status_code == 404


def test_delete_rejects_non_positive_ids(client, admin) -> None:
    assert client.delete(f'{USERS_URL}/0', headers=_auth_headers(admin)).status_code == 400


def test_delete_rejects_clients(client, customer) -> None:
    assert client.delete(f'{USERS_URL}/{customer.id}', headers=_auth_headers(customer)).status_code == 403


def test_root_reports_status(client) -> None:
    assert client.get('/').json() == {'status': 'CRUD Template API Running'}
