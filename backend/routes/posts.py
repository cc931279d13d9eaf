from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from db.store import get_store
from models.fields import split_tags
from services import estimate_reading_time, tag_payloads

posts_bp = Blueprint('posts', __name__)


def _with_reading_time(data):
    """Fill readingTime from the content when the caller did not supply one."""
    if data.get('content') and not (data.get('readingTime') or data.get('reading_time')):
        data = dict(data, readingTime=estimate_reading_time(data['content']))
    return data


def _sync_tags(store, tags):
    tags = split_tags(tags)
    if isinstance(tags, (list, tuple)) and tags:
        store.tags.create_many(tag_payloads(tags))

@posts_bp.route('', methods=['GET'])
@jwt_required()
def list_posts():
    """List all posts, drafts included; ?q= searches"""
    store = get_store()
    query = request.args.get('q')

    if query:
        posts = store.posts.search(query)
    else:
        posts = store.posts.get_all()

    return jsonify({'posts': posts}), 200

@posts_bp.route('', methods=['POST'])
@jwt_required()
def create_post():
    """Create a new post"""
    store = get_store()
    data = request.get_json(silent=True) or {}

    if not data.get('title') or not data.get('content'):
        return jsonify({'error': 'Title and content are required'}), 400

    post = store.posts.create(_with_reading_time(data))
    _sync_tags(store, data.get('tags'))

    return jsonify({'post': post}), 201

@posts_bp.route('/<slug>', methods=['GET'])
@jwt_required()
def get_post(slug):
    """Get a post by slug, drafts included"""
    post = get_store().posts.get_by_slug(slug)

    if not post:
        return jsonify({'error': 'Post not found'}), 404

    return jsonify({'post': post}), 200

@posts_bp.route('/<slug>', methods=['PUT'])
@jwt_required()
def update_post(slug):
    """Partially update a post; only the fields sent are changed"""
    store = get_store()
    data = request.get_json(silent=True) or {}

    post = store.posts.update(slug, _with_reading_time(data))
    if not post:
        return jsonify({'error': 'Post not found'}), 404

    _sync_tags(store, data.get('tags'))

    return jsonify({'post': post}), 200

@posts_bp.route('/<slug>', methods=['DELETE'])
@jwt_required()
def delete_post(slug):
    """Delete a post"""
    if not get_store().posts.delete(slug):
        return jsonify({'error': 'Post not found'}), 404

    return jsonify({'message': 'Post deleted successfully'}), 200
