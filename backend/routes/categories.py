from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from db.store import get_store

categories_bp = Blueprint('categories', __name__)

@categories_bp.route('', methods=['GET'])
@jwt_required()
def list_categories():
    """List categories; ?withCounts=true adds published post counts"""
    store = get_store()
    if request.args.get('withCounts', '').lower() in ('1', 'true'):
        categories = store.categories.get_with_post_counts()
    else:
        categories = store.categories.get_all()
    return jsonify({'categories': categories}), 200

@categories_bp.route('', methods=['POST'])
@jwt_required()
def create_category():
    data = request.get_json(silent=True) or {}

    if not data.get('name'):
        return jsonify({'error': 'Name is required'}), 400

    category = get_store().categories.create(data)
    return jsonify({'category': category}), 201

@categories_bp.route('/<slug>', methods=['GET'])
@jwt_required()
def get_category(slug):
    category = get_store().categories.get_by_slug(slug)
    if not category:
        return jsonify({'error': 'Category not found'}), 404
    return jsonify({'category': category}), 200

@categories_bp.route('/<slug>', methods=['PUT'])
@jwt_required()
def update_category(slug):
    data = request.get_json(silent=True) or {}
    category = get_store().categories.update(slug, data)
    if not category:
        return jsonify({'error': 'Category not found'}), 404
    return jsonify({'category': category}), 200

@categories_bp.route('/<slug>', methods=['DELETE'])
@jwt_required()
def delete_category(slug):
    # posts keep their category name; nothing cascades
    if not get_store().categories.delete(slug):
        return jsonify({'error': 'Category not found'}), 404
    return jsonify({'message': 'Category deleted successfully'}), 200
