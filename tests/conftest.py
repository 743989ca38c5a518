import pytest
from flask_jwt_extended import create_access_token

from app import create_app
from config import TestConfig
from database import connect, init_db, RecordStore


@pytest.fixture
def app(tmp_path):
    """App bound to a fresh sqlite file per test"""
    db_path = str(tmp_path / 'blog.db')

    class Config(TestConfig):
        DB_PATH = db_path

    init_db(db_path)
    app = create_app(Config)
    yield app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def store(app):
    conn = connect(app.config['DB_PATH'])
    yield RecordStore(conn)
    conn.close()


@pytest.fixture
def headers_for(app, client, store):
    """Bearer headers for a user id; the profile is provisioned on first use"""
    def _headers(user_id, username=None, is_admin=False):
        with app.app_context():
            claims = {'username': username} if username else {}
            token = create_access_token(identity=user_id, additional_claims=claims)
        headers = {'Authorization': f'Bearer {token}'}
        assert client.get('/api/profile', headers=headers).status_code == 200
        if is_admin:
            store.update('profiles', {'id': user_id}, {'is_admin': True})
        return headers
    return _headers


@pytest.fixture
def author(headers_for):
    return headers_for('author-1', 'alice')


@pytest.fixture
def reader(headers_for):
    return headers_for('reader-1', 'bob')


@pytest.fixture
def admin(headers_for):
    return headers_for('admin-1', 'root', is_admin=True)


@pytest.fixture
def category_id(store):
    return store.fetch_one('categories', {'slug': 'tech'})['id']


@pytest.fixture
def blog_form(category_id):
    return {
        'title': 'Hello, World!!!',
        'content': '<p>First <b>post</b></p>',
        'excerpt': 'A short intro',
        'category_id': category_id,
    }


@pytest.fixture
def published_blog(client, author, admin, blog_form):
    """A blog that went through review and was approved"""
    blog = client.post('/api/blogs', headers=author, json=dict(blog_form, submit=True)).get_json()
    response = client.post(f"/api/admin/blogs/{blog['id']}/approve", headers=admin)
    assert response.status_code == 200
    return response.get_json()['blog']
