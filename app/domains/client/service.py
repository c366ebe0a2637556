# app/domains/client/service.py
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models import Client

logger = logging.getLogger(__name__)


def profile_from_payload(payload: dict) -> dict:
    """Profile fields for a new client, taken from identity token claims."""
    metadata = payload.get("user_metadata") or {}
    email = payload.get("email") or ""
    return {
        "email": email,
        "name": metadata.get("full_name") or (email.split("@")[0] if email else "") or "User",
        "company": metadata.get("company") or "Unknown",
        "phone": metadata.get("phone") or None,
        "role": "client",
    }


class ClientService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_client_by_id(self, client_id: UUID) -> Optional[Client]:
        """Get a client profile by identity-provider id."""
        result = await self.db.execute(select(Client).where(Client.id == client_id))
        return result.scalar_one_or_none()

    async def create_client(self, client_id: UUID, **profile) -> Client:
        """Create a new client profile."""
        client = Client(id=client_id, **profile)

        try:
            self.db.add(client)
            await self.db.commit()
            await self.db.refresh(client)
            return client
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e

    async def get_or_create_client(self, client_id: UUID, payload: dict) -> Client:
        """Get the existing profile or create one from the token payload."""
        client = await self.get_client_by_id(client_id)
        if client:
            return client

        try:
            client = await self.create_client(client_id, **profile_from_payload(payload))
            logger.info("Created client profile for %s", client_id)
            return client
        except IntegrityError:
            # A concurrent request created it first.
            client = await self.get_client_by_id(client_id)
            if client is None:
                raise
            return client
