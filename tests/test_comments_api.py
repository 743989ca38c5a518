def post_comment(client, headers, blog_id, content, parent_id=None):
    return client.post(f'/api/blogs/{blog_id}/comments', headers=headers,
                       json={'content': content, 'parent_id': parent_id})


def test_add_comment_returns_rebuilt_tree(client, reader, published_blog):
    response = post_comment(client, reader, published_blog['id'], '  Great read  ')
    assert response.status_code == 201
    data = response.get_json()
    assert data['comment']['content'] == 'Great read'
    assert data['comment']['parent_id'] is None
    assert [c['id'] for c in data['comments']] == [data['comment']['id']]


def test_replies_are_nested_under_parent(client, reader, author, published_blog):
    blog_id = published_blog['id']
    root = post_comment(client, reader, blog_id, 'First').get_json()['comment']
    other = post_comment(client, author, blog_id, 'Second').get_json()['comment']
    reply = post_comment(client, author, blog_id, 'Thanks!', root['id']).get_json()['comment']
    nested = post_comment(client, reader, blog_id, 'You are welcome', reply['id']).get_json()['comment']

    tree = client.get(f'/api/blogs/{blog_id}/comments').get_json()
    assert [c['id'] for c in tree] == [root['id'], other['id']]
    assert [c['id'] for c in tree[0]['replies']] == [reply['id']]
    assert [c['id'] for c in tree[0]['replies'][0]['replies']] == [nested['id']]
    assert tree[0]['profiles']['username'] == 'bob'
    assert tree[1]['replies'] == []


def test_empty_comment_is_rejected(client, reader, published_blog):
    response = post_comment(client, reader, published_blog['id'], '   ')
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Comment cannot be empty'
    assert client.get(f"/api/blogs/{published_blog['id']}/comments").get_json() == []


def test_profanity_is_rejected(client, reader, published_blog):
    assert post_comment(client, reader, published_blog['id'], 'what a shit take').status_code == 400


def test_comment_on_missing_blog_is_404(client, reader):
    assert post_comment(client, reader, 'ghost', 'Hello').status_code == 404


def test_comment_on_unpublished_blog_is_404(client, author, reader, blog_form):
    draft = client.post('/api/blogs', headers=author, json=blog_form).get_json()
    assert post_comment(client, reader, draft['id'], 'Hello').status_code == 404


def test_reply_to_missing_parent_is_404(client, reader, published_blog):
    assert post_comment(client, reader, published_blog['id'], 'Hi', 'ghost').status_code == 404


def test_reply_to_comment_of_other_blog_is_404(client, author, reader, admin, blog_form, published_blog):
    other = client.post('/api/blogs', headers=author,
                        json=dict(blog_form, title='Other', submit=True)).get_json()
    client.post(f"/api/admin/blogs/{other['id']}/approve", headers=admin)
    foreign = post_comment(client, reader, other['id'], 'Elsewhere').get_json()['comment']

    response = post_comment(client, reader, published_blog['id'], 'Hi', foreign['id'])
    assert response.status_code == 404


def test_commenting_requires_token(client, published_blog):
    response = client.post(f"/api/blogs/{published_blog['id']}/comments", json={'content': 'x'})
    assert response.status_code == 401


def test_orphaned_reply_is_shown_as_root(client, reader, published_blog, store):
    blog_id = published_blog['id']
    root = post_comment(client, reader, blog_id, 'Root').get_json()['comment']
    reply = post_comment(client, reader, blog_id, 'Reply', root['id']).get_json()['comment']
    # Detach the parent without cascading, as a partially synced batch would look
    store.conn.execute('PRAGMA foreign_keys = OFF')
    store.conn.execute('DELETE FROM comments WHERE id = ?', (root['id'],))
    store.conn.commit()

    tree = client.get(f'/api/blogs/{blog_id}/comments').get_json()
    assert [c['id'] for c in tree] == [reply['id']]
