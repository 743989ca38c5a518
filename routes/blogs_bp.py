from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from auth import current_profile
from database import get_store
from services.blog_service import BlogService
from services.comment_service import CommentService
from services.like_service import LikeService

blogs_bp = Blueprint('blogs', __name__)


def blog_service():
    return BlogService(get_store(), current_app.config['BAD_WORDS'])


def comment_service():
    return CommentService(get_store(), current_app.config['BAD_WORDS'])


def _wants_submit(data):
    return str(data.get('submit', '')).lower() in ('1', 'true', 'yes')


# --- FEED & DETAIL ---

@blogs_bp.route('/blogs', methods=['GET'])
def list_blogs():
    """Approved blogs, newest first. Optional ?category=<slug>&featured=1&limit=N."""
    featured = request.args.get('featured')
    featured = None if featured is None else featured.lower() in ('1', 'true', 'yes')
    limit = request.args.get('limit', type=int)
    blogs = blog_service().list_published(category_slug=request.args.get('category'),
                                          featured=featured, limit=limit)
    return jsonify(blogs)


@blogs_bp.route('/blogs/mine', methods=['GET'])
@jwt_required()
def my_blogs():
    """The writer's dashboard: every own blog whatever its status, plus totals."""
    blogs, stats = blog_service().list_for_author(current_profile())
    return jsonify({"blogs": blogs, "stats": stats})


@blogs_bp.route('/blogs/<string:slug>', methods=['GET'])
@jwt_required(optional=True)
def get_blog(slug):
    return jsonify(blog_service().get_by_slug(slug, current_profile()))


# --- WRITING ---

@blogs_bp.route('/blogs', methods=['POST'])
@jwt_required()
def create_blog():
    """Creates a draft, or sends it straight to review when 'submit' is true."""
    data = request.get_json(silent=True) or {}
    blog = blog_service().create(current_profile(), data, submit=_wants_submit(data))
    return jsonify(blog), 201


@blogs_bp.route('/blogs/<string:blog_id>', methods=['PUT'])
@jwt_required()
def update_blog(blog_id):
    data = request.get_json(silent=True) or {}
    blog = blog_service().update(blog_id, current_profile(), data, submit=_wants_submit(data))
    return jsonify(blog)


@blogs_bp.route('/blogs/<string:blog_id>/submit', methods=['POST'])
@jwt_required()
def submit_blog(blog_id):
    return jsonify(blog_service().submit(blog_id, current_profile()))


# --- ENGAGEMENT ---

@blogs_bp.route('/blogs/<string:blog_id>/like', methods=['GET'])
@jwt_required()
def like_status(blog_id):
    profile = current_profile()
    return jsonify({"liked": LikeService(get_store()).is_liked(blog_id, profile['id'])})


@blogs_bp.route('/blogs/<string:blog_id>/like', methods=['POST'])
@jwt_required()
def toggle_like(blog_id):
    profile = current_profile()
    liked, like_count = LikeService(get_store()).toggle(blog_id, profile['id'])
    return jsonify({"liked": liked, "like_count": like_count})


# --- COMMENTS ---

@blogs_bp.route('/blogs/<string:blog_id>/comments', methods=['GET'])
def get_comments(blog_id):
    return jsonify(comment_service().get_tree(blog_id))


@blogs_bp.route('/blogs/<string:blog_id>/comments', methods=['POST'])
@jwt_required()
def add_comment(blog_id):
    profile = current_profile()
    comment, tree = comment_service().add_comment(blog_id, profile['id'],
                                                  request.get_json(silent=True))
    return jsonify({"comment": comment, "comments": tree}), 201
