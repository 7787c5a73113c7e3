from flask import current_app, g, request, jsonify
from flask_jwt_extended import jwt_required
from constitution.application.constitution.audit_log import list_audit_entries
from constitution.domain.audit_diff import CHANGE_KINDS
from constitution.normalizers.audit import normalize_audit_entry
from constitution.utils.decorators import actor_required, constitution_required
from . import constitution_bp


@constitution_bp.route("/audit", methods=["GET"])
@jwt_required()
@actor_required
@constitution_required
def list_audit_log():
    change_kind = request.args.get("change_kind")
    if change_kind and change_kind not in CHANGE_KINDS:
        return jsonify({"error": "Invalid change_kind"}), 400

    entries = list_audit_entries(
        constitution_id=g.current_constitution.id,
        actor_id=request.args.get("actor_id"),
        change_kind=change_kind,
        text=request.args.get("q"),
        limit=current_app.config["AUDIT_READ_LIMIT"],
    )

    return jsonify({
        "data": [normalize_audit_entry(entry) for entry in entries],
        "meta": {
            "count": len(entries),
            "limit": current_app.config["AUDIT_READ_LIMIT"],
        }
    }), 200
