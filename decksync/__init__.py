"""Sync deck content from Airtable into the static site's JSON files."""
