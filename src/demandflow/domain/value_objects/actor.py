"""Actor attribution attached to mutations and transitions."""

from dataclasses import dataclass

from demandflow.domain.value_objects.actor_role import ActorRole


@dataclass(frozen=True)
class Actor:
    """Who performs an action and from where."""

    actor_id: str
    role: ActorRole
    ip_address: str | None = None
    user_agent: str | None = None
