from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from db.store import get_store

authors_bp = Blueprint('authors', __name__)

@authors_bp.route('', methods=['GET'])
@jwt_required()
def list_authors():
    return jsonify({'authors': get_store().authors.get_all()}), 200

@authors_bp.route('', methods=['POST'])
@jwt_required()
def create_author():
    data = request.get_json(silent=True) or {}

    if not data.get('name'):
        return jsonify({'error': 'Name is required'}), 400

    author = get_store().authors.create(data)
    return jsonify({'author': author}), 201

@authors_bp.route('/<slug>', methods=['GET'])
@jwt_required()
def get_author(slug):
    author = get_store().authors.get_by_slug(slug)
    if not author:
        return jsonify({'error': 'Author not found'}), 404
    return jsonify({'author': author}), 200

@authors_bp.route('/<slug>', methods=['PUT'])
@jwt_required()
def update_author(slug):
    data = request.get_json(silent=True) or {}
    author = get_store().authors.update(slug, data)
    if not author:
        return jsonify({'error': 'Author not found'}), 404
    return jsonify({'author': author}), 200

@authors_bp.route('/<slug>', methods=['DELETE'])
@jwt_required()
def delete_author(slug):
    if not get_store().authors.delete(slug):
        return jsonify({'error': 'Author not found'}), 404
    return jsonify({'message': 'Author deleted successfully'}), 200
