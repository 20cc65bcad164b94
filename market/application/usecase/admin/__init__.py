"""Administration use cases."""

from .seed_admin import SeedAdminResponse, SeedAdminUseCase

__all__ = ["SeedAdminResponse", "SeedAdminUseCase"]
