from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from auth import current_profile
from database import get_store
from services.profile_service import CategoryService, ProfileService

profile_bp = Blueprint('profile', __name__)


@profile_bp.route('/categories', methods=['GET'])
def list_categories():
    return jsonify(CategoryService(get_store()).list())


@profile_bp.route('/categories', methods=['POST'])
@jwt_required()
def create_category():
    category = CategoryService(get_store()).create(current_profile(), request.get_json(silent=True))
    return jsonify(category), 201


@profile_bp.route('/profile', methods=['GET'])
@jwt_required()
def get_profile():
    return jsonify(current_profile())


@profile_bp.route('/profile', methods=['PUT'])
@jwt_required()
def update_profile():
    """Only full_name, avatar_url and bio can be changed here."""
    profile = current_profile()
    updated = ProfileService(get_store()).update(profile['id'], request.get_json(silent=True))
    return jsonify(updated)
