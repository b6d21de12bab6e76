# Base.metadata 에 모든 테이블을 등록하기 위한 import
from app.models.user import User, Role  # noqa: F401
from app.models.catalog import Department, AcademicSession, LearningTrack  # noqa: F401
from app.models.membership import MembershipApplication, ApplicationStatus, Member  # noqa: F401
from app.models.profile import AdminProfile, MentorProfile, ModeratorProfile  # noqa: F401
from app.models.notice import Notice  # noqa: F401
from app.models.admin_log import AdminActionLog, AdminAction  # noqa: F401
