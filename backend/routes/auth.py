import hmac
import logging

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, get_jwt_identity, jwt_required

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)

ADMIN_IDENTITY = 'admin'

@auth_bp.route('/login', methods=['POST'])
def login():
    """Exchange the admin password for an access token"""
    data = request.get_json(silent=True) or {}
    password = data.get('password')

    if not password:
        return jsonify({'error': 'Missing required fields'}), 400

    expected = current_app.config['ADMIN_PASSWORD']
    if not hmac.compare_digest(str(password).encode('utf-8'), expected.encode('utf-8')):
        logger.warning("Failed admin login from %s", request.remote_addr)
        return jsonify({'error': 'Invalid password'}), 401

    access_token = create_access_token(identity=ADMIN_IDENTITY)

    return jsonify({
        'success': True,
        'access_token': access_token
    }), 200

@auth_bp.route('/check', methods=['GET'])
@jwt_required()
def check():
    """Report whether the request carries a valid admin token"""
    return jsonify({'authenticated': get_jwt_identity() == ADMIN_IDENTITY}), 200
