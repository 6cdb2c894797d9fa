"""
Users Blueprint

Stub user endpoints. Nothing is stored: reads return canned records and
writes echo the decoded body back.

Endpoints:
- GET    /users            - List the sample users
- POST   /users            - Create a user (id is always 1)
- GET    /users/<id>       - Get a user by id
- PUT    /users/<id>       - Replace a user
- DELETE /users/<id>       - Delete a user
- GET    /users/<id>/posts - List a user's posts
"""

import logging

from flask import Blueprint, jsonify

from stubapi.models import SAMPLE_USERS, Post, User
from stubapi.utils import no_content, parse_id, read_json_object

logger = logging.getLogger(__name__)

users_bp = Blueprint("users", __name__, url_prefix="/users")

# Every created user gets this id; there is no store to allocate from.
CREATED_USER_ID = 1


@users_bp.route("", methods=["GET"])
def list_users():
    """List all users."""
    return jsonify([user.to_dict() for user in SAMPLE_USERS])


@users_bp.route("", methods=["POST"])
def create_user():
    """
    Create a user.

    Request (JSON):
        - name: string
        - email: string

    Any ``id`` in the body is replaced.
    """
    user = User.from_payload(read_json_object())
    user.id = CREATED_USER_ID
    logger.debug("Created user %r", user)
    return jsonify(user.to_dict()), 201


@users_bp.route("/<user_id>", methods=["GET"])
def get_user(user_id: str):
    """Get a specific user by ID."""
    user = User(id=parse_id(user_id), name="Sample User", email="user@example.com")
    return jsonify(user.to_dict())


@users_bp.route("/<user_id>", methods=["PUT"])
def update_user(user_id: str):
    """Replace a user. The path id wins over any id in the body."""
    parsed_id = parse_id(user_id)
    user = User.from_payload(read_json_object())
    user.id = parsed_id
    return jsonify(user.to_dict())


@users_bp.route("/<user_id>", methods=["DELETE"])
def delete_user(user_id: str):
    """Delete a user. Responds 204 with no body."""
    parse_id(user_id)
    return no_content()


@users_bp.route("/<user_id>/posts", methods=["GET"])
def get_user_posts(user_id: str):
    """List posts written by a user."""
    post = Post(id=1, user_id=parse_id(user_id), title="User Post", body="Content")
    return jsonify([post.to_dict()])
