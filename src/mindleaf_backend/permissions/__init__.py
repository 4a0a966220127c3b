"""
Access control for the Mind Leaf backend.

Main components:
- principal: caller identity variants and the role permission table
- allowlist: course visibility by email allow list
- enrollment: enrollment existence checks
- access: composite predicates (manage, full lesson content, enroll)
- handlers / handlers_impl: per-entity permission handlers and their registry
- query_builders: id sets used to scope queries
- core: handler registration and the check entry points
- auth: bearer token resolution, login and password reset
"""

from .principal import (
    Principal,
    AnonymousPrincipal,
    AuthenticatedPrincipal,
    ROLE_PERMISSIONS,
    is_admin,
    has_any_role,
)

from .core import (
    check_permission,
    check_permissions,
    visible_courses,
    initialize_permission_handlers,
    can_see_course,
    can_enroll,
    can_manage_course,
    can_view_full_lesson_content,
)

from .allowlist import (
    is_on_course_allow_list,
    normalize_email,
    normalize_allowed_emails,
)

from .enrollment import is_enrolled_in_course

__all__ = [
    'Principal',
    'AnonymousPrincipal',
    'AuthenticatedPrincipal',
    'ROLE_PERMISSIONS',
    'is_admin',
    'has_any_role',
    'check_permission',
    'check_permissions',
    'visible_courses',
    'initialize_permission_handlers',
    'can_see_course',
    'can_enroll',
    'can_manage_course',
    'can_view_full_lesson_content',
    'is_on_course_allow_list',
    'normalize_email',
    'normalize_allowed_emails',
    'is_enrolled_in_course',
]
