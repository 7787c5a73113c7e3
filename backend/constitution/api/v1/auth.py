from flask import g, request, jsonify
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    get_jwt,
    get_jwt_identity,
    jwt_required,
)
from constitution.models.user import User
from constitution.utils.decorators import actor_required
from . import v1_bp


def _issue_tokens(user_id, name, *, refresh=True):
    # The editor's name travels with the token so audit entries need no lookup
    claims = {"name": name}

    tokens = {"access_token": create_access_token(identity=user_id, additional_claims=claims)}
    if refresh:
        tokens["refresh_token"] = create_refresh_token(identity=user_id, additional_claims=claims)
    return tokens


@v1_bp.route("/auth/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid request body"}), 400

    email = data.get("email")
    password = data.get("password")

    if not email or not password:
        return jsonify({"error": "Email and password required"}), 400

    user = User.query.filter_by(email=email).first()

    if not user or not user.check_password(password):
        return jsonify({"error": "Invalid credentials"}), 401

    if not user.is_active:
        return jsonify({"error": "User account disabled"}), 403

    return jsonify(_issue_tokens(user.id, user.name)), 200


@v1_bp.route("/auth/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh():
    return jsonify(
        _issue_tokens(get_jwt_identity(), get_jwt().get("name"), refresh=False)
    ), 200


@v1_bp.route("/auth/me", methods=["GET"])
@jwt_required()
@actor_required
def whoami():
    return jsonify({"id": g.current_actor.id, "name": g.current_actor.name}), 200
