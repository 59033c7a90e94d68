"""Party domain service."""

import uuid
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import Party as PartyEntity, PartyType
from ledgerbook.domain.errors import NotFoundError, ValidationError, account_not_found


class PartyService:
    """Service for managing customers, vendors and other counterparties."""

    def __init__(self, db: Database):
        """Initialize party service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_party(
        self,
        name: str,
        party_type: PartyType = PartyType.OTHER,
        linked_account_id: Optional[str] = None,
    ) -> str:
        """Create a party.

        Args:
            name: Display name
            party_type: Customer, vendor, employee or other
            linked_account_id: Optional receivable/payable sub-ledger account

        Returns:
            Party ID

        Raises:
            ValidationError: If the name is empty
            NotFoundError: If the linked account doesn't exist
        """
        if not name or not name.strip():
            raise ValidationError("Party name cannot be empty")
        if linked_account_id is not None and self.db.get_account(linked_account_id) is None:
            raise NotFoundError(account_not_found(linked_account_id))

        party = PartyEntity(
            id=uuid.uuid4().hex,
            name=name,
            party_type=party_type,
            linked_account_id=linked_account_id,
        )
        return self.db.create_party(party)

    def get_party(self, party_id: str) -> Optional[PartyEntity]:
        """Get party by ID."""
        return self.db.get_party(party_id)

    def list_parties(self) -> list[PartyEntity]:
        """List all parties ordered by name."""
        return self.db.list_parties()

    def resolve_party(self, party: str) -> PartyEntity:
        """Find a party by ID or exact name.

        Raises:
            NotFoundError: If no party matches
        """
        found = self.db.get_party(party)
        if found is not None:
            return found
        for candidate in self.db.list_parties():
            if candidate.name == party:
                return candidate
        raise NotFoundError(f"Party '{party}' not found")
