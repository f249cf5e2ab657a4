from flask import Blueprint

routine_bp = Blueprint(
    "training",
    __name__,
    template_folder="../templates/training",
)

from . import routes  # noqa
