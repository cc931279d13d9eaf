import logging
import math
import os
import re
import time

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required
from werkzeug.utils import secure_filename

from db.store import get_store

logger = logging.getLogger(__name__)

media_bp = Blueprint('media', __name__)

_UNSAFE_NAME = re.compile(r'[^a-zA-Z0-9]')


def _stored_filename(original):
    """Timestamp-prefixed, filesystem-safe name for an upload"""
    base, ext = os.path.splitext(secure_filename(original))
    safe = _UNSAFE_NAME.sub('-', base) or 'upload'
    return f"{int(time.time() * 1000)}-{safe}{ext.lower()}"


def _remove_file(path):
    """Remove an uploaded file; paths outside the upload directory are never touched."""
    if not path:
        return
    upload_dir = os.path.realpath(current_app.config['UPLOAD_PATH'])
    target = os.path.realpath(path)
    if os.path.commonpath([upload_dir, target]) != upload_dir:
        logger.warning("Refusing to remove %s outside %s", target, upload_dir)
        return
    try:
        os.remove(target)
    except FileNotFoundError:
        logger.info("Media file %s was already gone", target)
    except OSError as e:
        logger.warning("Could not remove media file %s: %s", target, e)

@media_bp.route('', methods=['GET'])
@jwt_required()
def list_media():
    """List media with pagination; ?q= searches names and alt text"""
    store = get_store()
    page = max(request.args.get('page', 1, type=int), 1)
    limit = max(request.args.get('limit', 50, type=int), 1)
    query = request.args.get('q')

    offset = (page - 1) * limit
    if query:
        files = store.media.search(query, limit=limit, offset=offset)
    else:
        files = store.media.get_all(limit=limit, offset=offset)

    total = store.media.count(query)

    return jsonify({
        'files': files,
        'pagination': {
            'page': page,
            'limit': limit,
            'total': total,
            'totalPages': math.ceil(total / limit)
        }
    }), 200

@media_bp.route('', methods=['POST'])
@jwt_required()
def upload_media():
    """Upload an image and record its metadata"""
    file = request.files.get('file')

    if not file or not file.filename:
        return jsonify({'error': 'No file provided'}), 400

    if file.mimetype not in current_app.config['ALLOWED_MEDIA_TYPES']:
        return jsonify({'error': 'Invalid file type'}), 400

    upload_dir = current_app.config['UPLOAD_PATH']
    os.makedirs(upload_dir, exist_ok=True)

    filename = _stored_filename(file.filename)
    file_path = os.path.join(upload_dir, filename)
    file.save(file_path)

    url_prefix = current_app.config['UPLOAD_URL_PREFIX'].rstrip('/')
    try:
        media = get_store().media.create({
            'filename': filename,
            'originalName': file.filename,
            'path': file_path,
            'url': f"{url_prefix}/{filename}",
            'mimeType': file.mimetype,
            'size': os.path.getsize(file_path),
            'width': request.form.get('width'),
            'height': request.form.get('height'),
            'altText': request.form.get('altText', ''),
        })
    except Exception:
        # no row, no file
        _remove_file(file_path)
        raise

    logger.info("Uploaded %s (%s bytes)", filename, media['size'])
    return jsonify({'success': True, 'media': media}), 201

@media_bp.route('', methods=['DELETE'])
@jwt_required()
def delete_media_by_filename():
    """Delete a media item by ?filename="""
    filename = request.args.get('filename')
    if not filename:
        return jsonify({'error': 'Filename required'}), 400

    media = get_store().media.delete_by_filename(filename)
    if not media:
        return jsonify({'error': 'Media not found'}), 404

    _remove_file(media['path'])
    return jsonify({'success': True}), 200

@media_bp.route('/bulk', methods=['DELETE'])
@jwt_required()
def delete_media_bulk():
    """Delete several media items: {"ids": [...]}; reports success per id"""
    data = request.get_json(silent=True) or {}
    ids = data.get('ids')

    if not isinstance(ids, list) or not ids:
        return jsonify({'error': 'Invalid ids array'}), 400

    store = get_store()
    results = []
    for media_id in ids:
        media = store.media.delete(media_id)
        if not media:
            results.append({'id': media_id, 'success': False, 'error': 'Media not found'})
            continue
        _remove_file(media['path'])
        results.append({'id': media_id, 'success': True})

    logger.info("Bulk delete: %d of %d media items removed",
                sum(1 for r in results if r['success']), len(ids))
    return jsonify({'results': results}), 200

@media_bp.route('/<int:media_id>', methods=['GET'])
@jwt_required()
def get_media(media_id):
    media = get_store().media.get_by_id(media_id)
    if not media:
        return jsonify({'error': 'Media not found'}), 404
    return jsonify({'media': media}), 200

@media_bp.route('/<int:media_id>', methods=['PUT'])
@jwt_required()
def update_media(media_id):
    """Update metadata such as altText"""
    data = request.get_json(silent=True) or {}
    media = get_store().media.update(media_id, data)
    if not media:
        return jsonify({'error': 'Media not found'}), 404
    return jsonify({'media': media}), 200

@media_bp.route('/<int:media_id>', methods=['DELETE'])
@jwt_required()
def delete_media(media_id):
    media = get_store().media.delete(media_id)
    if not media:
        return jsonify({'error': 'Media not found'}), 404

    _remove_file(media['path'])
    return jsonify({'success': True}), 200
