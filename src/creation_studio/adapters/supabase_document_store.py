"""Supabase-backed document store."""

from collections.abc import Mapping
from dataclasses import dataclass

from supabase import Client

from creation_studio.services.creations import DocumentStore

# PostgreSQL resolves this timestamp input literal with the server clock.
SERVER_NOW = "now"


@dataclass
class SupabaseDocumentStore(DocumentStore):
    """Maps document collections onto Supabase tables."""

    client: Client

    def insert(self, collection: str, data: dict[str, object]) -> str:
        """Insert a row and return its generated id."""
        response = self.client.table(collection).insert(data).execute()
        if not response.data:
            raise RuntimeError(f"Failed to insert into {collection}")
        return str(response.data[0]["id"])

    def query(
        self, collection: str, filters: Mapping[str, object]
    ) -> list[dict[str, object]]:
        """Return rows matching every equality filter in insertion order."""
        request = self.client.table(collection).select("*")
        for column, value in filters.items():
            request = request.eq(column, value)
        response = request.order("created_at").execute()
        return list(response.data or [])

    def delete(self, collection: str, document_id: str) -> None:
        """Delete a row by id."""
        self.client.table(collection).delete().eq("id", document_id).execute()

    def server_timestamp(self) -> object:
        """Return the database-clock marker."""
        return SERVER_NOW
