"""Public, unauthenticated read endpoints. Drafts are never exposed here."""

from flask import Blueprint, jsonify, request

from db.store import get_store

blog_bp = Blueprint('blog', __name__)

@blog_bp.route('/posts', methods=['GET'])
def list_posts():
    """Published posts, filtered by category, tag or featured, else paginated"""
    posts = get_store().posts
    category = request.args.get('category')
    tag = request.args.get('tag')

    if category:
        return jsonify({'posts': posts.get_by_category(category)}), 200
    if tag:
        return jsonify({'posts': posts.get_by_tag(tag)}), 200
    if request.args.get('featured', '').lower() in ('1', 'true'):
        return jsonify({'posts': posts.get_featured()}), 200

    page = request.args.get('page', 1, type=int)
    limit = min(request.args.get('limit', 10, type=int), 100)
    return jsonify(posts.get_paginated(page=page, limit=limit)), 200

@blog_bp.route('/posts/<slug>', methods=['GET'])
def get_post(slug):
    post = get_store().posts.get_by_slug(slug)
    if not post or post['draft']:
        return jsonify({'error': 'Post not found'}), 404
    return jsonify({'post': post}), 200

@blog_bp.route('/posts/<slug>/views', methods=['POST'])
def record_view(slug):
    if not get_store().posts.increment_views(slug):
        return jsonify({'error': 'Post not found'}), 404
    return jsonify({'success': True}), 200

@blog_bp.route('/search', methods=['GET'])
def search():
    query = (request.args.get('q') or '').strip()
    if not query:
        return jsonify({'error': 'Query parameter "q" is required'}), 400

    results = get_store().posts.search(query, published_only=True)
    return jsonify({'query': query, 'results': results}), 200

@blog_bp.route('/categories', methods=['GET'])
def list_categories():
    return jsonify({'categories': get_store().categories.get_with_post_counts()}), 200

@blog_bp.route('/tags', methods=['GET'])
def list_tags():
    return jsonify({'tags': get_store().tags.get_all()}), 200

@blog_bp.route('/tags/popular', methods=['GET'])
def popular_tags():
    limit = min(max(request.args.get('limit', 20, type=int), 1), 100)
    return jsonify({'tags': get_store().tags.get_popular(limit=limit)}), 200
