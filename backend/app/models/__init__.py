from app.models.enrollment import Enrollment, EnrollmentStatus  # noqa: F401
from app.models.hierarchy import DegreeProgram, Department, Faculty, Module  # noqa: F401
from app.models.medical_request import MedicalRequest, MedicalStatus  # noqa: F401
from app.models.notice import Notice  # noqa: F401
from app.models.notification_state import NotificationState  # noqa: F401
from app.models.user import AdminType, User, UserRole  # noqa: F401
