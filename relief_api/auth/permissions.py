"""Role to capability mapping used to gate the HTTP surface."""
import enum
from typing import Iterable

from relief_api.errors import Forbidden
from relief_api.models import RoleName


class Capability(str, enum.Enum):
    VIEW_ALL_REPORTS = "reports:view_all"
    VIEW_REPORT_ANALYTICS = "reports:analytics"
    UPDATE_REPORT_STATUS = "reports:update_status"
    VIEW_OWN_TASKS = "tasks:view_own"
    VIEW_TASKS = "tasks:view"
    MANAGE_TASKS = "tasks:manage"
    UPDATE_TASK_STATUS = "tasks:update_status"
    MANAGE_SHELTERS = "shelters:manage"
    MANAGE_RESOURCES = "resources:manage"
    MANAGE_NOTIFICATIONS = "notifications:manage"


ROLE_CAPABILITIES = {
    RoleName.CITIZEN: frozenset(),
    RoleName.RESCUE_WORKER: frozenset({
        Capability.VIEW_ALL_REPORTS,
        Capability.UPDATE_REPORT_STATUS,
        Capability.VIEW_OWN_TASKS,
        Capability.VIEW_TASKS,
        Capability.UPDATE_TASK_STATUS,
    }),
    RoleName.NGO: frozenset({
        Capability.VIEW_ALL_REPORTS,
        Capability.VIEW_REPORT_ANALYTICS,
        Capability.MANAGE_SHELTERS,
        Capability.MANAGE_RESOURCES,
    }),
    RoleName.GOVERNMENT: frozenset({
        Capability.VIEW_ALL_REPORTS,
        Capability.VIEW_REPORT_ANALYTICS,
        Capability.UPDATE_REPORT_STATUS,
        Capability.VIEW_TASKS,
        Capability.MANAGE_TASKS,
        Capability.UPDATE_TASK_STATUS,
        Capability.MANAGE_SHELTERS,
        Capability.MANAGE_RESOURCES,
        Capability.MANAGE_NOTIFICATIONS,
    }),
}


def parse_roles(role_names: Iterable[str]) -> set:
    """Known roles among ``role_names``; unknown names grant nothing."""
    known = {r.value: r for r in RoleName}
    return {known[name] for name in role_names if name in known}


def capabilities_for(role_names: Iterable[str]) -> frozenset:
    caps = frozenset()
    for role in parse_roles(role_names):
        caps |= ROLE_CAPABILITIES[role]
    return caps


def has_capability(role_names: Iterable[str], capability: Capability) -> bool:
    return capability in capabilities_for(role_names)


def authorize(role_names: Iterable[str], allowed: Iterable[RoleName]) -> None:
    """Raise Forbidden unless at least one of ``allowed`` is held."""
    if not parse_roles(role_names) & set(allowed):
        raise Forbidden("Insufficient permissions")


def roles_with(capability: Capability) -> set:
    return {role for role, caps in ROLE_CAPABILITIES.items() if capability in caps}


def require(role_names: Iterable[str], capability: Capability) -> None:
    authorize(role_names, roles_with(capability))
