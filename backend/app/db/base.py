from backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all
from backend.app.models.client import Client  # noqa: F401
from backend.app.models.payment import Payment  # noqa: F401
from backend.app.models.session import Session  # noqa: F401
from backend.app.models.reminder import Reminder  # noqa: F401
