from flask import jsonify
from constitution.domain.invariants.exceptions import (
    ConcurrencyConflict,
    InvariantViolation,
    MoveRejected,
    StructuralIntegrityError,
)


def _error(kind, message, status_code):
    response = jsonify({
        "error": kind,
        "message": message
    })
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        return _error("InvariantViolation", str(error), 400)

    @app.errorhandler(MoveRejected)
    def handle_move_rejected(error):
        return _error("MoveRejected", str(error), 400)

    @app.errorhandler(StructuralIntegrityError)
    def handle_structural_integrity_error(error):
        app.logger.error("Structural integrity error: %s (sections %s)", error, error.section_ids)
        return _error("StructuralIntegrityError", str(error), 409)

    @app.errorhandler(ConcurrencyConflict)
    def handle_concurrency_conflict(error):
        return _error("ConcurrencyConflict", str(error), 409)
