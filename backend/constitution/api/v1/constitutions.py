# constitution/api/v1/constitutions.py
from flask import current_app, g, request, jsonify
from flask_jwt_extended import jwt_required
from constitution.application.constitution.constitution import update_constitution
from constitution.application.constitution.queries import load_sections
from constitution.domain.search import search_sections
from constitution.normalizers.constitution import normalize_constitution
from constitution.normalizers.layout import normalize_layout
from constitution.normalizers.search import normalize_search_result
from constitution.utils.decorators import actor_required, constitution_required
from . import constitution_bp


@constitution_bp.route("", methods=["GET"])
@jwt_required()
@actor_required
@constitution_required
def get_constitution():
    constitution = g.current_constitution
    sections = load_sections(constitution.id)

    return jsonify(normalize_constitution(constitution, section_count=len(sections)))


@constitution_bp.route("", methods=["PUT"])
@jwt_required()
@actor_required
@constitution_required
def put_constitution():
    data = request.get_json(silent=True) or {}

    constitution = update_constitution(
        constitution_id=g.current_constitution.id,
        actor_id=g.current_actor.id,
        data=data,
    )

    return jsonify(normalize_constitution(constitution)), 200


@constitution_bp.route("/layout", methods=["GET"])
@jwt_required()
@actor_required
@constitution_required
def get_layout():
    sections = load_sections(g.current_constitution.id)

    return jsonify(
        normalize_layout(
            sections,
            toc_per_page=current_app.config["TOC_ENTRIES_PER_PAGE"],
            chars_per_page=current_app.config["CHARS_PER_ESTIMATED_PAGE"],
        )
    )


@constitution_bp.route("/search", methods=["GET"])
@jwt_required()
@actor_required
@constitution_required
def search():
    query = request.args.get("q", "")
    sections = load_sections(g.current_constitution.id)

    return jsonify({
        "query": query,
        "items": [normalize_search_result(r) for r in search_sections(sections, query)],
    })
