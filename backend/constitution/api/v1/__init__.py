from flask import Blueprint

# Create the versioned blueprint
v1_bp = Blueprint("v1", __name__)

# Everything scoped to one constitution lives under /constitution;
# routes there resolve it with @constitution_required after authentication
constitution_bp = Blueprint("constitution", __name__)

# Import route modules so they register with their blueprints
from . import health
from . import auth
from . import constitutions
from . import sections
from . import audit

v1_bp.register_blueprint(constitution_bp, url_prefix="/constitution")
