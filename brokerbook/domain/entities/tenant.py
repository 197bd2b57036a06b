"""Authenticated principal supplied by the external auth layer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Tenant:
    """An agent owning an isolated namespace of records.

    The handle is trusted as-is; credentials are verified upstream.
    """

    handle: str
    role: str = "user"
