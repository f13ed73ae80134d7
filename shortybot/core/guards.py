"""Command invocation context and the role checks run before a command mutates state."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

# Role hierarchy (higher index = higher privilege)
ROLE_HIERARCHY = ["everyone", "moderator", "broadcaster"]


@dataclass(frozen=True)
class InvocationContext:
    """One command invocation: who sent it, with which arguments, and how to answer."""

    user_name: str
    message_id: str
    reply: Callable[[str], Awaitable[None]] = field(repr=False, compare=False)
    args: tuple[str, ...] = ()
    is_broadcaster: bool = False
    is_moderator: bool = False


def has_role(ctx: InvocationContext, min_role: str) -> bool:
    """Check if the invoker meets the minimum role requirement."""
    if min_role == "everyone":
        return True

    min_level = ROLE_HIERARCHY.index(min_role) if min_role in ROLE_HIERARCHY else 0

    if ctx.is_broadcaster:
        return ROLE_HIERARCHY.index("broadcaster") >= min_level
    if ctx.is_moderator:
        return ROLE_HIERARCHY.index("moderator") >= min_level

    return min_level == 0


def is_broadcaster(ctx: InvocationContext) -> bool:
    return has_role(ctx, "broadcaster")


def is_moderator(ctx: InvocationContext) -> bool:
    """True for moderators and for the broadcaster, who outranks them."""
    return has_role(ctx, "moderator")
