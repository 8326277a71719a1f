# Import every model so Base.metadata sees all tables
from fieldforce.models.checkin import Checkin  # noqa: F401
from fieldforce.models.client import Client, EmployeeClient  # noqa: F401
from fieldforce.models.user import User  # noqa: F401
