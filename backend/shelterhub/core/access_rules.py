"""Access Rules — pure decision over a principal and its membership role on a group.

Invariants:
    - Site admin grants every level without consulting membership
    - MEMBER requires any membership row; GROUP_ADMIN requires role ADMIN
    - GROUP_ADMIN granted implies MEMBER granted
    - A missing membership (None) never grants anything to a non-admin

Design Decisions:
    - Pure function: the evaluator in services/ does the IO and the fail-closed mapping,
      this module only decides
"""

from shelterhub.core.domain_types import AccessLevel, MembershipRole, Principal


def requires_membership_lookup(principal: Principal) -> bool:
    """Site admins short-circuit; everyone else needs the membership row."""
    return not principal.is_site_admin


def decide_access(
    principal: Principal,
    role: MembershipRole | None,
    required: AccessLevel,
) -> bool:
    """Decide whether `principal` holding `role` on a group satisfies `required`."""
    if principal.is_site_admin:
        return True
    if role is None:
        return False
    if required is AccessLevel.MEMBER:
        return True
    if required is AccessLevel.GROUP_ADMIN:
        return role is MembershipRole.ADMIN
    return False
