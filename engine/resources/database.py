"""
Static data database.

Loads and validates the read-only data tables (interaction
definitions) that are built once at startup and shared by every
character.
"""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema


class Database:
    """
    Central storage for static game data.

    Layout under data_path:
        schemas/<name>.schema.json
        database/<category>/*.json   (a list of entries or a single entry)
    """

    def __init__(self, data_path: Path | str):
        self._data_path = Path(data_path)
        self._schemas: dict[str, Any] = {}

        # Data stores
        self.interactions: dict[str, Any] = {}

        self.logger = logging.getLogger(__name__)

    @property
    def data_path(self) -> Path:
        return self._data_path

    def load_all(self) -> None:
        """Load all data from disk."""
        self._load_schemas()

        self.interactions = self.load_category("interactions", "interaction.schema.json")

        self.logger.info(f"Loaded {len(self.interactions)} interactions.")

    def _load_schemas(self) -> None:
        """Load JSON schemas."""
        schema_dir = self._data_path / "schemas"
        if not schema_dir.exists():
            self.logger.warning(f"Schema directory not found: {schema_dir}")
            return

        for schema_file in sorted(schema_dir.glob("*.schema.json")):
            try:
                with open(schema_file, 'r', encoding='utf-8') as f:
                    self._schemas[schema_file.name] = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load schema {schema_file}: {e}")

    def load_category(self, folder: str, schema_name: str) -> dict[str, Any]:
        """
        Load every JSON file in a category folder.

        Entries are keyed by their 'id'. Entries failing schema
        validation are logged and skipped. A category without a
        schema is not loaded at all.

        Raises:
            ValueError: If two entries share an id
        """
        category_dir = self._data_path / "database" / folder
        data_store: dict[str, Any] = {}

        if not category_dir.exists():
            self.logger.warning(f"Data directory not found: {category_dir}")
            return data_store

        schema = self._schemas.get(schema_name)
        if schema is None:
            self.logger.warning(f"No schema found for {folder} ({schema_name})")
            return data_store

        # Sorted so catalog iteration order is stable across platforms
        for file_path in sorted(category_dir.glob("*.json")):
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load {file_path}: {e}")
                continue

            entries = data if isinstance(data, list) else [data]
            for entry in entries:
                try:
                    jsonschema.validate(instance=entry, schema=schema)
                except jsonschema.ValidationError as e:
                    self.logger.error(f"Validation error in {file_path}: {e.message}")
                    continue

                entry_id = entry.get('id') if isinstance(entry, dict) else None
                if entry_id is None:
                    self.logger.error(f"Entry without id in {file_path}")
                    continue
                if entry_id in data_store:
                    raise ValueError(f"Duplicate id '{entry_id}' in {file_path}")

                data_store[entry_id] = entry

        return data_store

    def get_interaction(self, interaction_id: str) -> dict[str, Any] | None:
        return self.interactions.get(interaction_id)
