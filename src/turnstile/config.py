"""Path policy configuration.

PathPolicy is a frozen dataclass — immutable after creation, shared by every
stage that needs to know which paths are public, API or admin.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PathPolicy:
    """Classifies request paths. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        policy = PathPolicy(public_prefixes=("/public", "/docs"))
    """

    # Paths that skip authentication and authorization
    public_prefixes: tuple[str, ...] = ("/public",)
    public_paths: tuple[str, ...] = ("/health",)

    # Paths subject to body content-type validation
    api_prefix: str = "/api"

    # Paths served only to the admin role
    admin_prefix: str = "/api/admin"

    def is_public(self, path: str) -> bool:
        """True if *path* bypasses identity checks."""
        if path in self.public_paths:
            return True
        return any(path.startswith(prefix) for prefix in self.public_prefixes)

    def is_api(self, path: str) -> bool:
        return path.startswith(self.api_prefix)

    def is_admin(self, path: str) -> bool:
        return path.startswith(self.admin_prefix)


DEFAULT_POLICY = PathPolicy()
