"""ORM models. Importing this package registers every table on Base.metadata."""
from ensemble.models.user import User, user_roles  # noqa: F401
from ensemble.models.role import Role  # noqa: F401
from ensemble.models.event import Event  # noqa: F401
from ensemble.models.attendance import Attendance, AttendanceHistory, AttendanceStatus  # noqa: F401
from ensemble.models.profile_change_request import ProfileChangeRequest, RequestStatus  # noqa: F401
from ensemble.models.clothing_item import ClothingItem  # noqa: F401
