"""Actor roles and the workflow capabilities they grant."""

from enum import StrEnum


class ActorRole(StrEnum):
    """Roles known to the firm's identity provider."""

    FIRM_ADMIN = "FIRM_ADMIN"
    ATTORNEY = "ATTORNEY"
    PARALEGAL = "PARALEGAL"
    DEBTOR = "DEBTOR"
    PUBLIC_DEFENDER = "PUBLIC_DEFENDER"


class Capability(StrEnum):
    """Capabilities required by workflow actions."""

    EDITOR = "editor"
    APPROVER = "approver"


ROLE_CAPABILITIES: dict[ActorRole, frozenset[Capability]] = {
    ActorRole.FIRM_ADMIN: frozenset({Capability.EDITOR, Capability.APPROVER}),
    ActorRole.ATTORNEY: frozenset({Capability.EDITOR, Capability.APPROVER}),
    ActorRole.PARALEGAL: frozenset({Capability.EDITOR}),
    ActorRole.DEBTOR: frozenset(),
    ActorRole.PUBLIC_DEFENDER: frozenset(),
}

# Most privileged first; used to pick one role when a token carries several.
ROLE_PRECEDENCE: tuple[ActorRole, ...] = (
    ActorRole.FIRM_ADMIN,
    ActorRole.ATTORNEY,
    ActorRole.PARALEGAL,
    ActorRole.PUBLIC_DEFENDER,
    ActorRole.DEBTOR,
)


def has_capability(role: ActorRole, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES.get(role, frozenset())
