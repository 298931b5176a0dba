"""Authorization collaborator for lifecycle operations"""

from .roles import PERMISSIONS, PolicyAction, PolicyRole, RoleAuthorizer, has_permission

__all__ = ["PERMISSIONS", "PolicyAction", "PolicyRole", "RoleAuthorizer", "has_permission"]
