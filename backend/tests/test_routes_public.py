import pytest
from unittest.mock import patch

from db.manager import DatabaseManager


@pytest.fixture
def published(store):
    store.posts.create({'slug': 'first', 'title': 'First', 'content': 'Flask tips', 'date': '2024-01-01',
                        'category': 'Web Development', 'tags': ['Flask'], 'draft': False})
    store.posts.create({'slug': 'second', 'title': 'Second', 'content': 'Docker notes', 'date': '2024-02-01',
                        'category': 'DevOps', 'tags': ['Docker'], 'draft': False, 'featured': True})
    store.posts.create({'slug': 'secret', 'title': 'Secret Flask', 'content': 'wip', 'date': '2024-03-01'})


class TestPosts:

    def test_paginated_listing_hides_drafts(self, client, published):
        response = client.get('/api/posts?limit=1')
        assert response.status_code == 200
        data = response.get_json()
        assert [p['slug'] for p in data['posts']] == ['second']
        assert data['pagination']['total'] == 2
        assert data['pagination']['totalPages'] == 2

    def test_filters(self, client, published):
        by_category = client.get('/api/posts?category=devops').get_json()
        assert [p['slug'] for p in by_category['posts']] == ['second']

        by_tag = client.get('/api/posts?tag=flask').get_json()
        assert [p['slug'] for p in by_tag['posts']] == ['first']

        featured = client.get('/api/posts?featured=true').get_json()
        assert [p['slug'] for p in featured['posts']] == ['second']

    def test_get_post(self, client, published):
        response = client.get('/api/posts/first')
        assert response.status_code == 200
        assert response.get_json()['post']['title'] == 'First'

    def test_drafts_and_missing_are_404(self, client, published):
        assert client.get('/api/posts/secret').status_code == 404
        assert client.get('/api/posts/nope').status_code == 404

    def test_record_view(self, client, store, published):
        assert client.post('/api/posts/first/views').status_code == 200
        assert client.post('/api/posts/first/views').status_code == 200
        assert store.posts.get_by_slug('first')['views'] == 2
        assert client.post('/api/posts/nope/views').status_code == 404


class TestSearch:

    def test_requires_query(self, client):
        assert client.get('/api/search').status_code == 400
        assert client.get('/api/search?q=%20').status_code == 400

    def test_published_results_only(self, client, published):
        data = client.get('/api/search?q=flask').get_json()
        assert data['query'] == 'flask'
        assert [p['slug'] for p in data['results']] == ['first']


def test_categories_with_counts(client, published):
    categories = client.get('/api/categories').get_json()['categories']
    counts = {c['slug']: c['postCount'] for c in categories}
    assert counts['devops'] == 1
    assert counts['web-development'] == 1
    assert len(categories) == 8


def test_tags(client, store):
    store.tags.create_many(['Flask', 'Docker'])
    tags = client.get('/api/tags').get_json()['tags']
    assert [t['name'] for t in tags] == ['Docker', 'Flask']


def test_storage_outage_maps_to_503(client):
    with patch.object(DatabaseManager, '_open', side_effect=OSError('disk full')):
        response = client.get('/api/posts')

    assert response.status_code == 503
    assert response.get_json() == {'error': 'Service temporarily unavailable'}


def test_unknown_route_is_json_404(client):
    response = client.get('/api/does-not-exist')
    assert response.status_code == 404
    assert 'error' in response.get_json()


def test_popular_tags(client, store, published):
    store.tags.create_many(['Flask', 'Docker', 'Unused'])
    tags = client.get('/api/tags/popular').get_json()['tags']
    assert [(t['name'], t['postCount']) for t in tags] == [('Docker', 1), ('Flask', 1)]
