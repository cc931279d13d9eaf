from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from db.store import get_store

stats_bp = Blueprint('stats', __name__)

@stats_bp.route('', methods=['GET'])
@jwt_required()
def get_stats():
    """Dashboard counters"""
    return jsonify(get_store().stats.get_overview()), 200
