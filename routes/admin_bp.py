from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from auth import current_profile, require_admin
from core.lifecycle import Action
from database import get_store
from services.blog_service import BlogService
from services.schemas import FeatureSchema, ModerationSchema, load

admin_bp = Blueprint('admin', __name__)


def blog_service():
    return BlogService(get_store(), current_app.config['BAD_WORDS'])


# --- STATS & QUEUE ---

@admin_bp.route('/admin/stats')
@jwt_required()
def get_admin_stats():
    return jsonify(blog_service().admin_stats(require_admin()))


@admin_bp.route('/admin/pending')
@jwt_required()
def get_pending_blogs():
    """Submissions waiting for review, oldest first."""
    return jsonify(blog_service().pending_queue(require_admin()))


# --- ACTION ROUTES ---

@admin_bp.route('/admin/blogs/<string:blog_id>/approve', methods=['POST'])
@jwt_required()
def approve_blog(blog_id):
    blog = blog_service().moderate(blog_id, current_profile(), Action.APPROVE)
    return jsonify({"message": "Blog approved", "blog": blog})


@admin_bp.route('/admin/blogs/<string:blog_id>/reject', methods=['POST'])
@jwt_required()
def reject_blog(blog_id):
    """Rejects with an optional reason the author sees on their dashboard."""
    form = load(ModerationSchema(), request.get_json(silent=True))
    blog = blog_service().moderate(blog_id, current_profile(), Action.REJECT,
                                   feedback=form['feedback'])
    return jsonify({"message": "Blog rejected", "blog": blog})


@admin_bp.route('/admin/blogs/<string:blog_id>/hide', methods=['POST'])
@jwt_required()
def hide_blog(blog_id):
    blog = blog_service().moderate(blog_id, current_profile(), Action.HIDE)
    return jsonify({"message": "Blog hidden", "blog": blog})


@admin_bp.route('/admin/blogs/<string:blog_id>/feature', methods=['POST'])
@jwt_required()
def feature_blog(blog_id):
    form = load(FeatureSchema(), request.get_json(silent=True))
    blog = blog_service().set_featured(blog_id, current_profile(), form['featured'])
    return jsonify({"message": "Blog updated", "blog": blog})
