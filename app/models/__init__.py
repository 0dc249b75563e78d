# Campus Gate Access - Database Models
# Import all models here for SQLAlchemy discovery

from app.models.user import User                  # noqa
from app.models.vehicle import Vehicle            # noqa
from app.models.gate import Gate                  # noqa
from app.models.access_log import AccessLog       # noqa
from app.models.visitor import Visitor            # noqa
