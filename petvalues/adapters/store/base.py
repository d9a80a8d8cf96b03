from abc import ABC, abstractmethod
from typing import Any


class AbstractCatalogStore(ABC):
	"""Interface for the hosted database backing the pet catalog."""

	@property
	@abstractmethod
	def has_admin_access(self) -> bool:
		"""Whether privileged (write) operations are configured."""
		...

	@abstractmethod
	async def list_pets(self) -> list[dict[str, Any]]:
		"""Return all pets ordered by ``value`` descending."""
		...

	@abstractmethod
	async def get_pet(self, pet_id: int, *, privileged: bool = False) -> dict[str, Any] | None:
		"""Return a single pet row, or None when it does not exist.

		Args:
			pet_id: Primary key of the pet.
			privileged: Read with admin credentials (bypasses row-level security).
		"""
		...

	@abstractmethod
	async def insert_pet(self, data: dict[str, Any]) -> dict[str, Any]:
		"""Insert a pet and return the stored row."""
		...

	@abstractmethod
	async def update_pet(self, pet_id: int, data: dict[str, Any]) -> dict[str, Any] | None:
		"""Update a pet and return the stored row, or None if no row matched."""
		...

	@abstractmethod
	async def delete_pet(self, pet_id: int) -> None:
		"""Delete a pet. Deleting a missing id is not an error."""
		...

	@abstractmethod
	async def find_active_admin(self, username: str, password: str) -> dict[str, Any] | None:
		"""Return the active admin row matching the credentials, if any."""
		...

	@abstractmethod
	async def insert_audit_entry(self, entry: dict[str, Any]) -> None:
		"""Append an entry to the audit log."""
		...

	async def aclose(self) -> None:
		"""Release network resources held by the store."""
		return None
