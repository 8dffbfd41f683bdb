"""
BootstrapService -- first-run seeding of the admin user and API token.

Responsibility:
    Ensures the ``admin`` user exists and stores the admin bearer token in
    ``app_meta.ADMIN_TOKEN``.  Safe to run repeatedly: the user is created
    once, the token is replaced on every run.

Architecture position:
    Kernel > Services -- runs inside ``run_exclusive`` like every other
    mutation, so it can be executed against a live data file.

Failure modes:
    - StorageIOError propagated from the coordinator.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import uuid4

from inventory_kernel.domain.values import format_timestamp
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.document import Document
from inventory_kernel.models.user import User
from inventory_kernel.services.base import BaseService

logger = get_logger("services.bootstrap")

ADMIN_USERNAME = "admin"
ADMIN_ROLE = "admin"
ADMIN_TOKEN_KEY = "ADMIN_TOKEN"


@dataclass(frozen=True)
class BootstrapResult:
    admin: User
    admin_token: str
    admin_created: bool


class BootstrapService(BaseService):
    """Seeds the document with the admin principal."""

    def initialize(self, admin_token: str | None = None) -> BootstrapResult:
        """
        Ensure the admin user exists and set the admin token.

        Args:
            admin_token: Token to store; a random UUID when omitted.
        """
        token = admin_token or str(uuid4())

        def _seed(document: Document) -> BootstrapResult:
            record = document.find_user(ADMIN_USERNAME)
            created = record is None
            if created:
                record = User(
                    id=str(uuid4()),
                    username=ADMIN_USERNAME,
                    role=ADMIN_ROLE,
                    created_at=format_timestamp(self.clock.now()),
                ).to_record()
                document.users.append(record)
            document.app_meta[ADMIN_TOKEN_KEY] = token
            return BootstrapResult(
                admin=User.from_record(record),
                admin_token=token,
                admin_created=created,
            )

        result = self.coordinator.run_exclusive(_seed, operation="bootstrap")
        logger.info(
            "bootstrap_completed",
            extra={"admin_id": result.admin.id, "admin_created": result.admin_created},
        )
        return result
