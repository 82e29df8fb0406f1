# service/maven_registry/core/policy.py
from dataclasses import dataclass
from typing import List, Optional

from .config import Settings, get_settings
from .security import Role

READ_PACKAGE = "read_package"
ADMIN_PACKAGE = "admin_package"

_ROLE_RANK = {Role.viewer: 1, Role.developer: 2, Role.maintainer: 3}
_ABILITY_MIN_ROLE = {READ_PACKAGE: Role.viewer, ADMIN_PACKAGE: Role.developer}


@dataclass
class Actor:
    username: str
    role: Role
    projects: Optional[List[str]] = None  # None = member of every project

    def member_of(self, project_id: str) -> bool:
        return self.projects is None or project_id in self.projects


class PackagePolicy:
    """
    Capability checks consulted before any package operation.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def packages_enabled(self) -> bool:
        return self.settings.PACKAGES_ENABLED

    def feature_available(self, project_id: str) -> bool:
        return project_id not in self.settings.PACKAGES_DISABLED_PROJECTS

    def can(self, actor: Optional[Actor], ability: str, project_id: str) -> bool:
        if actor is None:
            return ability == READ_PACKAGE and self.settings.ALLOW_ANONYMOUS_READ
        if not actor.member_of(project_id):
            return False
        return _ROLE_RANK[actor.role] >= _ROLE_RANK[_ABILITY_MIN_ROLE[ability]]
