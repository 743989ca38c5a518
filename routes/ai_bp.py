from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from auth import require_admin
from database import get_store
from services.blog_service import BlogService
from services.schemas import ExcerptRequestSchema, load

"""
AI assistance for writers and moderators. Results are suggestions only:
nothing here changes a blog's content or status.
"""

ai_bp = Blueprint('ai', __name__)


def ai_service():
    return current_app.extensions['ai']


@ai_bp.route('/ai/excerpt', methods=['POST'])
@jwt_required()
def suggest_excerpt():
    form = load(ExcerptRequestSchema(), request.get_json(silent=True))
    return jsonify({"excerpt": ai_service().suggest_excerpt(form['content'])})


@ai_bp.route('/admin/blogs/<string:blog_id>/safety', methods=['GET'])
@jwt_required()
def check_blog(blog_id):
    """Advisory safety scan a moderator can run before approving."""
    require_admin()
    blog = BlogService(get_store()).get(blog_id)
    return jsonify({"blog_id": blog_id, "status": ai_service().safety_check(blog)})
