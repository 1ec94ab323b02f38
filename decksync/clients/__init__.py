from decksync.clients.airtable import AirtableClient

__all__ = ["AirtableClient"]
