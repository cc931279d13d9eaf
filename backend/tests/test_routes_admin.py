import io
import os

import pytest


class TestAdminPosts:

    def test_create_post(self, client, store, auth_headers):
        response = client.post('/api/admin/posts', headers=auth_headers, json={
            'title': 'My First Post',
            'content': 'word ' * 450,
            'tags': ['Flask', 'SQLite'],
        })
        assert response.status_code == 201
        post = response.get_json()['post']
        assert post['slug'] == 'my-first-post'
        assert post['draft'] is True
        assert post['readingTime'] == '3 min read'
        # tags used by a post are registered in the tags table
        assert {t['slug'] for t in store.tags.get_all()} == {'flask', 'sqlite'}

    def test_create_requires_title_and_content(self, client, auth_headers):
        response = client.post('/api/admin/posts', headers=auth_headers, json={'title': 'x'})
        assert response.status_code == 400

    def test_duplicate_slug_is_409(self, client, auth_headers):
        payload = {'slug': 'same', 'title': 'T', 'content': 'C'}
        assert client.post('/api/admin/posts', headers=auth_headers, json=payload).status_code == 201

        response = client.post('/api/admin/posts', headers=auth_headers, json=payload)
        assert response.status_code == 409
        assert "'same' already exists" in response.get_json()['error']

    def test_list_includes_drafts(self, client, store, auth_headers):
        store.posts.create({'slug': 'd', 'title': 'Draft', 'content': 'x'})
        posts = client.get('/api/admin/posts', headers=auth_headers).get_json()['posts']
        assert [p['slug'] for p in posts] == ['d']

    def test_update_and_publish(self, client, store, auth_headers):
        store.posts.create({'slug': 'p', 'title': 'Title', 'content': 'x', 'readingTime': '9 min read'})

        response = client.put('/api/admin/posts/p', headers=auth_headers, json={'draft': False})
        assert response.status_code == 200
        post = response.get_json()['post']
        assert post['draft'] is False
        assert post['readingTime'] == '9 min read'

    def test_update_content_recomputes_reading_time(self, client, store, auth_headers):
        store.posts.create({'slug': 'p', 'title': 'Title', 'content': 'x', 'readingTime': '9 min read'})
        response = client.put('/api/admin/posts/p', headers=auth_headers, json={'content': 'short'})
        assert response.get_json()['post']['readingTime'] == '1 min read'

    def test_invalid_value_is_400(self, client, store, auth_headers):
        store.posts.create({'slug': 'p', 'title': 'Title', 'content': 'x'})
        response = client.put('/api/admin/posts/p', headers=auth_headers, json={'featured': 'sometimes'})
        assert response.status_code == 400
        assert response.get_json()['field'] == 'featured'

    def test_missing_post(self, client, auth_headers):
        assert client.get('/api/admin/posts/nope', headers=auth_headers).status_code == 404
        assert client.put('/api/admin/posts/nope', headers=auth_headers, json={'title': 'x'}).status_code == 404
        assert client.delete('/api/admin/posts/nope', headers=auth_headers).status_code == 404

    def test_delete(self, client, store, auth_headers):
        store.posts.create({'slug': 'p', 'title': 'Title', 'content': 'x'})
        assert client.delete('/api/admin/posts/p', headers=auth_headers).status_code == 200
        assert store.posts.get_by_slug('p') is None


class TestAuthorsCategoriesTags:

    def test_author_crud(self, client, auth_headers):
        response = client.post('/api/admin/authors', headers=auth_headers, json={'name': 'Jane Doe'})
        assert response.status_code == 201

        response = client.put('/api/admin/authors/jane-doe', headers=auth_headers, json={'bio': 'Writer'})
        assert response.get_json()['author']['bio'] == 'Writer'

        assert client.delete('/api/admin/authors/jane-doe', headers=auth_headers).status_code == 200
        assert client.get('/api/admin/authors/jane-doe', headers=auth_headers).status_code == 404

    def test_duplicate_category_is_409(self, client, auth_headers):
        response = client.post('/api/admin/categories', headers=auth_headers,
                               json={'slug': 'devops', 'name': 'DevOps'})
        assert response.status_code == 409

    def test_categories_with_counts(self, client, auth_headers):
        response = client.get('/api/admin/categories?withCounts=true', headers=auth_headers)
        categories = response.get_json()['categories']
        assert all(c['postCount'] == 0 for c in categories)

    def test_tags_single_and_batch(self, client, auth_headers):
        response = client.post('/api/admin/tags', headers=auth_headers, json={'name': 'Python'})
        assert response.status_code == 201
        # a repeated tag is not an error
        response = client.post('/api/admin/tags', headers=auth_headers, json={'name': 'Python'})
        assert response.status_code == 201

        response = client.post('/api/admin/tags', headers=auth_headers, json=['Python', 'Go', 'Rust'])
        assert response.get_json() == {'success': True, 'created': 2, 'count': 3}

        found = client.get('/api/admin/tags?q=py', headers=auth_headers).get_json()['tags']
        assert [t['slug'] for t in found] == ['python']


class TestMedia:

    def _upload(self, client, auth_headers, name='My Photo.png', mimetype='image/png'):
        return client.post(
            '/api/admin/media',
            headers=auth_headers,
            data={'file': (io.BytesIO(b'\x89PNG fake image'), name, mimetype),
                  'altText': 'A photo', 'width': '640', 'height': '480'},
            content_type='multipart/form-data',
        )

    def test_upload_stores_file_and_row(self, client, app, auth_headers):
        response = self._upload(client, auth_headers)
        assert response.status_code == 201
        media = response.get_json()['media']

        assert media['filename'].endswith('-My-Photo.png')
        assert media['url'] == f"/images/blog/{media['filename']}"
        assert media['originalName'] == 'My Photo.png'
        assert media['size'] == len(b'\x89PNG fake image')
        assert media['width'] == 640
        assert os.path.exists(os.path.join(app.config['UPLOAD_PATH'], media['filename']))

    def test_rejects_other_types(self, client, auth_headers):
        response = self._upload(client, auth_headers, name='script.js', mimetype='text/javascript')
        assert response.status_code == 400

    def test_requires_file(self, client, auth_headers):
        response = client.post('/api/admin/media', headers=auth_headers, data={},
                               content_type='multipart/form-data')
        assert response.status_code == 400

    def test_list_and_delete_by_id(self, client, auth_headers):
        media = self._upload(client, auth_headers).get_json()['media']

        listing = client.get('/api/admin/media', headers=auth_headers).get_json()
        assert [m['id'] for m in listing['files']] == [media['id']]
        assert listing['pagination']['total'] == 1

        assert client.delete(f"/api/admin/media/{media['id']}", headers=auth_headers).status_code == 200
        assert not os.path.exists(media['path'])
        assert client.delete(f"/api/admin/media/{media['id']}", headers=auth_headers).status_code == 404

    def test_delete_by_filename(self, client, auth_headers):
        media = self._upload(client, auth_headers).get_json()['media']

        response = client.delete(f"/api/admin/media?filename={media['filename']}", headers=auth_headers)
        assert response.status_code == 200
        assert not os.path.exists(media['path'])
        assert client.delete('/api/admin/media', headers=auth_headers).status_code == 400

    def test_update_alt_text(self, client, auth_headers):
        media = self._upload(client, auth_headers).get_json()['media']
        response = client.put(f"/api/admin/media/{media['id']}", headers=auth_headers,
                              json={'altText': 'Updated'})
        assert response.get_json()['media']['altText'] == 'Updated'


def test_stats(client, store, auth_headers):
    store.posts.create({'slug': 'p', 'title': 'T', 'content': 'x', 'draft': False})
    stats = client.get('/api/admin/stats', headers=auth_headers).get_json()
    assert stats['totalPosts'] == 1
    assert stats['publishedPosts'] == 1
    assert stats['categories'] == 8


def test_comma_separated_tags_are_registered(client, store, auth_headers):
    response = client.post('/api/admin/posts', headers=auth_headers, json={
        'title': 'Tagged', 'content': 'x', 'tags': 'Docker, CI/CD',
    })
    assert response.get_json()['post']['tags'] == ['Docker', 'CI/CD']
    assert {t['slug'] for t in store.tags.get_all()} == {'docker', 'ci-cd'}


class TestMediaBulkAndPaging:

    def _upload(self, client, auth_headers, name):
        return client.post(
            '/api/admin/media',
            headers=auth_headers,
            data={'file': (io.BytesIO(b'GIF89a'), name, 'image/gif'), 'altText': 'sunset'},
            content_type='multipart/form-data',
        ).get_json()['media']

    def test_bulk_delete_reports_each_id(self, client, store, auth_headers):
        first = self._upload(client, auth_headers, 'one.gif')
        second = self._upload(client, auth_headers, 'two.gif')

        response = client.delete('/api/admin/media/bulk', headers=auth_headers,
                                 json={'ids': [first['id'], 9999, second['id']]})

        assert response.status_code == 200
        results = response.get_json()['results']
        assert [(r['id'], r['success']) for r in results] == [
            (first['id'], True), (9999, False), (second['id'], True)
        ]
        assert store.media.count() == 0
        assert not os.path.exists(first['path'])
        assert not os.path.exists(second['path'])

    def test_bulk_delete_requires_ids(self, client, auth_headers):
        assert client.delete('/api/admin/media/bulk', headers=auth_headers, json={}).status_code == 400
        assert client.delete('/api/admin/media/bulk', headers=auth_headers,
                             json={'ids': []}).status_code == 400

    def test_search_honours_page_and_limit(self, client, auth_headers):
        for name in ('a.gif', 'b.gif', 'c.gif'):
            self._upload(client, auth_headers, name)

        data = client.get('/api/admin/media?q=sunset&limit=2&page=2', headers=auth_headers).get_json()

        assert [m['originalName'] for m in data['files']] == ['a.gif']
        assert data['pagination'] == {'page': 2, 'limit': 2, 'total': 3, 'totalPages': 2}
