def submit(client, headers, form):
    return client.post('/api/blogs', headers=headers, json=dict(form, submit=True)).get_json()


def test_review_cycle_reject_then_resubmit(client, author, admin, blog_form):
    blog = client.post('/api/blogs', headers=author, json=blog_form).get_json()
    assert blog['status'] == 'draft'

    pending = client.post(f"/api/blogs/{blog['id']}/submit", headers=author).get_json()
    assert pending['status'] == 'pending'

    response = client.post(f"/api/admin/blogs/{blog['id']}/reject", headers=admin,
                           json={'feedback': 'needs citations'})
    assert response.status_code == 200
    rejected = response.get_json()['blog']
    assert rejected['status'] == 'rejected'
    assert rejected['admin_feedback'] == 'needs citations'
    assert rejected['published_at'] is None

    dashboard = client.get('/api/blogs/mine', headers=author).get_json()
    assert dashboard['blogs'][0]['admin_feedback'] == 'needs citations'

    resubmitted = client.put(f"/api/blogs/{blog['id']}", headers=author,
                             json=dict(blog_form, content='<p>now with sources</p>', submit=True))
    assert resubmitted.status_code == 200
    assert resubmitted.get_json()['status'] == 'pending'
    assert resubmitted.get_json()['admin_feedback'] == ''


def test_approve_sets_published_at(client, author, admin, blog_form):
    blog = submit(client, author, blog_form)
    approved = client.post(f"/api/admin/blogs/{blog['id']}/approve", headers=admin).get_json()['blog']
    assert approved['status'] == 'approved'
    assert approved['published_at'] is not None
    assert approved['admin_feedback'] == ''


def test_non_admin_cannot_approve(client, author, reader, blog_form):
    blog = submit(client, author, blog_form)
    assert client.post(f"/api/admin/blogs/{blog['id']}/approve", headers=author).status_code == 403
    assert client.post(f"/api/admin/blogs/{blog['id']}/approve", headers=reader).status_code == 403


def test_approving_a_draft_is_invalid(client, author, admin, blog_form):
    blog = client.post('/api/blogs', headers=author, json=blog_form).get_json()
    assert client.post(f"/api/admin/blogs/{blog['id']}/approve", headers=admin).status_code == 409
    assert client.post(f"/api/admin/blogs/{blog['id']}/approve", headers=author).status_code == 409


def test_hide_only_from_approved(client, author, admin, blog_form, published_blog):
    pending = submit(client, author, dict(blog_form, title='Other'))
    assert client.post(f"/api/admin/blogs/{pending['id']}/hide", headers=admin).status_code == 409

    hidden = client.post(f"/api/admin/blogs/{published_blog['id']}/hide", headers=admin)
    assert hidden.status_code == 200
    assert hidden.get_json()['blog']['status'] == 'hidden'
    assert client.get('/api/blogs').get_json() == []
    assert client.get(f"/api/blogs/{published_blog['slug']}").status_code == 404


def test_approved_blog_is_locked_for_author(client, author, blog_form, published_blog):
    response = client.put(f"/api/blogs/{published_blog['id']}", headers=author,
                          json=dict(blog_form, submit=True))
    assert response.status_code == 409


def test_pending_queue_oldest_first(client, author, admin, reader, blog_form):
    first = submit(client, author, dict(blog_form, title='First'))
    second = submit(client, author, dict(blog_form, title='Second'))
    client.post('/api/blogs', headers=author, json=dict(blog_form, title='Draft'))

    queue = client.get('/api/admin/pending', headers=admin).get_json()
    assert [b['id'] for b in queue] == [first['id'], second['id']]
    assert queue[0]['profiles'] == {'username': 'alice', 'full_name': None}
    assert client.get('/api/admin/pending', headers=reader).status_code == 403


def test_admin_stats(client, author, admin, reader, blog_form, published_blog):
    submit(client, author, dict(blog_form, title='Waiting'))
    client.post(f"/api/blogs/{published_blog['id']}/comments", headers=reader, json={'content': 'Nice'})

    stats = client.get('/api/admin/stats', headers=admin).get_json()
    assert stats == {'total_users': 3, 'total_blogs': 2, 'pending_blogs': 1, 'total_comments': 1}
    assert client.get('/api/admin/stats', headers=author).status_code == 403


def test_feature_requires_admin_and_approved(client, author, admin, blog_form, published_blog):
    draft = client.post('/api/blogs', headers=author, json=dict(blog_form, title='Draft')).get_json()
    assert client.post(f"/api/admin/blogs/{draft['id']}/feature", headers=admin).status_code == 409
    assert client.post(f"/api/admin/blogs/{published_blog['id']}/feature",
                       headers=author).status_code == 403

    featured = client.post(f"/api/admin/blogs/{published_blog['id']}/feature", headers=admin,
                           json={'featured': True}).get_json()['blog']
    assert featured['is_featured'] is True
    unfeatured = client.post(f"/api/admin/blogs/{published_blog['id']}/feature", headers=admin,
                             json={'featured': False}).get_json()['blog']
    assert unfeatured['is_featured'] is False
