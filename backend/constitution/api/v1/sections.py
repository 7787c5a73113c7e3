# constitution/api/v1/sections.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from constitution.application.constitution.create_section import create_section
from constitution.application.constitution.delete_section import delete_section
from constitution.application.constitution.move_section import move_section, relocate_section
from constitution.application.constitution.queries import get_section_or_404, load_sections
from constitution.application.constitution.update_section import update_section
from constitution.domain.hierarchy import find_orphans
from constitution.domain.layout import flatten_hierarchy
from constitution.domain.reorder import validate_move
from constitution.normalizers.section import normalize_section
from constitution.utils.decorators import actor_required, constitution_required
from constitution.utils.optimistic_lock import enforce_optimistic_lock
from . import constitution_bp


def _destination_index(data):
    index = data.get("destination_index")
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        return None
    return index


# ------------------------
# Sections
# ------------------------

@constitution_bp.route("/sections", methods=["GET"])
@jwt_required()
@actor_required
@constitution_required
def list_sections():
    sections = load_sections(g.current_constitution.id)

    return jsonify({
        "items": [normalize_section(s, sections, admin=True) for s in sections],
        "orphans": [s.id for s in find_orphans(sections)],
    })


@constitution_bp.route("/sections", methods=["POST"])
@jwt_required()
@actor_required
@constitution_required
def post_section():
    data = request.get_json(silent=True) or {}

    section_type = data.get("type")
    if not section_type:
        return jsonify({"error": "Section type is required"}), 400

    section = create_section(
        constitution_id=g.current_constitution.id,
        section_type=section_type,
        parent_id=data.get("parent_id"),
        actor_id=g.current_actor.id,
        actor_name=g.current_actor.name,
    )
    sections = load_sections(g.current_constitution.id)

    return jsonify(normalize_section(section, sections, admin=True)), 201


@constitution_bp.route("/sections/<section_id>", methods=["PUT"])
@jwt_required()
@actor_required
@constitution_required
def put_section(section_id):
    constitution = g.current_constitution
    section = get_section_or_404(constitution.id, section_id)

    # -----------------------
    # Optimistic Locking Check
    # -----------------------
    enforce_optimistic_lock(section)

    data = request.get_json(silent=True) or {}

    section = update_section(
        constitution_id=constitution.id,
        section_id=section_id,
        actor_id=g.current_actor.id,
        actor_name=g.current_actor.name,
        data=data,
    )
    sections = load_sections(constitution.id)

    return jsonify(normalize_section(section, sections, admin=True)), 200


@constitution_bp.route("/sections/<section_id>", methods=["DELETE"])
@jwt_required()
@actor_required
@constitution_required
def remove_section(section_id):
    delete_section(
        constitution_id=g.current_constitution.id,
        section_id=section_id,
        actor_id=g.current_actor.id,
        actor_name=g.current_actor.name,
    )

    return jsonify({"message": "Section deleted"}), 200


# ------------------------
# Reordering
# ------------------------

@constitution_bp.route("/sections/<section_id>/move", methods=["POST"])
@jwt_required()
@actor_required
@constitution_required
def post_move(section_id):
    data = request.get_json(silent=True) or {}

    result = move_section(
        constitution_id=g.current_constitution.id,
        section_id=section_id,
        direction=data.get("direction"),
        actor_id=g.current_actor.id,
        actor_name=g.current_actor.name,
    )

    return jsonify(result), 200


@constitution_bp.route("/sections/validate-move", methods=["POST"])
@jwt_required()
@actor_required
@constitution_required
def post_validate_move():
    data = request.get_json(silent=True) or {}
    constitution = g.current_constitution

    destination_index = _destination_index(data)
    if destination_index is None or not data.get("section_id"):
        return jsonify({"error": "section_id and a non-negative destination_index are required"}), 400

    section = get_section_or_404(constitution.id, data["section_id"])
    sections = load_sections(constitution.id)
    hierarchy = flatten_hierarchy([s for s in sections if s.id != section.id])

    validation = validate_move(section, destination_index, hierarchy)

    return jsonify({
        "is_valid": validation.is_valid,
        "new_parent_id": validation.new_parent_id,
        "message": validation.message,
    }), 200


@constitution_bp.route("/sections/<section_id>/relocate", methods=["POST"])
@jwt_required()
@actor_required
@constitution_required
def post_relocate(section_id):
    data = request.get_json(silent=True) or {}

    destination_index = _destination_index(data)
    if destination_index is None:
        return jsonify({"error": "A non-negative destination_index is required"}), 400

    section = relocate_section(
        constitution_id=g.current_constitution.id,
        section_id=section_id,
        destination_index=destination_index,
        actor_id=g.current_actor.id,
        actor_name=g.current_actor.name,
    )
    sections = load_sections(g.current_constitution.id)

    return jsonify(normalize_section(section, sections, admin=True)), 200
