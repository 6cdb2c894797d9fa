"""
Posts Blueprint

Endpoints:
- GET  /posts      - List the sample posts
- POST /posts      - Create a post (id is always 1)
- GET  /posts/<id> - Get a post by id
"""

from flask import Blueprint, jsonify

from stubapi.models import SAMPLE_POSTS, Post
from stubapi.utils import parse_id, read_json_object

posts_bp = Blueprint("posts", __name__, url_prefix="/posts")

CREATED_POST_ID = 1


@posts_bp.route("", methods=["GET"])
def list_posts():
    """List all posts."""
    return jsonify([post.to_dict() for post in SAMPLE_POSTS])


@posts_bp.route("", methods=["POST"])
def create_post():
    """
    Create a post.

    Request (JSON):
        - userId: integer
        - title: string
        - body: string
    """
    post = Post.from_payload(read_json_object())
    post.id = CREATED_POST_ID
    return jsonify(post.to_dict()), 201


@posts_bp.route("/<post_id>", methods=["GET"])
def get_post(post_id: str):
    """Get a specific post by ID."""
    post = Post(id=parse_id(post_id), user_id=1, title="Sample Post", body="Post body")
    return jsonify(post.to_dict())
