from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from db.store import get_store

tags_bp = Blueprint('tags', __name__)

@tags_bp.route('', methods=['GET'])
@jwt_required()
def list_tags():
    """List tags; ?q= returns up to 10 matches for autocomplete"""
    store = get_store()
    query = request.args.get('q')
    tags = store.tags.search(query) if query else store.tags.get_all()
    return jsonify({'tags': tags}), 200

@tags_bp.route('', methods=['POST'])
@jwt_required()
def create_tags():
    """Create one tag, or a batch when the body is a list. Existing slugs are left as they are."""
    store = get_store()
    data = request.get_json(silent=True)

    if isinstance(data, list):
        created = store.tags.create_many(data)
        return jsonify({'success': True, 'created': created, 'count': len(data)}), 201

    data = data or {}
    if not data.get('name'):
        return jsonify({'error': 'Name is required'}), 400

    tag = store.tags.create(data)
    return jsonify({'tag': tag}), 201

@tags_bp.route('/<slug>', methods=['GET'])
@jwt_required()
def get_tag(slug):
    tag = get_store().tags.get_by_slug(slug)
    if not tag:
        return jsonify({'error': 'Tag not found'}), 404
    return jsonify({'tag': tag}), 200

@tags_bp.route('/<slug>', methods=['PUT'])
@jwt_required()
def update_tag(slug):
    data = request.get_json(silent=True) or {}
    tag = get_store().tags.update(slug, data)
    if not tag:
        return jsonify({'error': 'Tag not found'}), 404
    return jsonify({'tag': tag}), 200

@tags_bp.route('/<slug>', methods=['DELETE'])
@jwt_required()
def delete_tag(slug):
    if not get_store().tags.delete(slug):
        return jsonify({'error': 'Tag not found'}), 404
    return jsonify({'message': 'Tag deleted successfully'}), 200
