"""Document store: durable load/save of the business document."""

import json
from decimal import Decimal

import structlog
from sqlalchemy.exc import SQLAlchemyError

from shopledger.database.base import DocumentSlot
from shopledger.database.mappers import document_to_dict, document_to_domain
from shopledger.database.migrations import CURRENT_SCHEMA_VERSION, migrate_document
from shopledger.domain.entities import BusinessData
from shopledger.domain.validation import validate_document_dict

logger = structlog.get_logger(__name__)

STORAGE_KEY = "business_data"


def default_document() -> BusinessData:
    """Return the empty document used on first run and after failures."""
    return BusinessData()


class DocumentStore:
    """Loads, validates, migrates and saves the single business document.

    No method raises: failures degrade to the default document or a False
    return value, and are reported through the structured log.
    """

    def __init__(self, slot: DocumentSlot, key: str = STORAGE_KEY):
        """Initialize document store.

        Args:
            slot: Key-value slot holding the serialized document
            key: Slot key of the document
        """
        self.slot = slot
        self.key = key

    def load(self) -> BusinessData:
        """Load the document, migrating older schemas.

        Returns:
            The stored document, or the default document if it is absent,
            unreadable or invalid after migration
        """
        try:
            payload = self.slot.read(self.key)
        except SQLAlchemyError as e:
            logger.error("store.load.read_failed", key=self.key, error=str(e))
            return default_document()

        if payload is None:
            return default_document()

        try:
            raw = json.loads(payload, parse_float=Decimal)
        except ValueError as e:
            logger.error("store.load.unparsable", key=self.key, error=str(e))
            return default_document()

        if not isinstance(raw, dict):
            logger.error("store.load.unparsable", key=self.key, error="not a JSON object")
            return default_document()

        try:
            document = migrate_document(raw)
            validate_document_dict(document)
            return document_to_domain(document)
        except (ValueError, TypeError, ArithmeticError) as e:
            logger.warning("store.load.invalid_document", key=self.key, error=str(e))
            return default_document()

    def save(self, data: BusinessData) -> bool:
        """Validate and persist the document.

        Returns:
            True if the document was written, False if it failed validation
            or could not be stored
        """
        try:
            raw = document_to_dict(data, CURRENT_SCHEMA_VERSION)
            validate_document_dict(raw)
            payload = json.dumps(raw, ensure_ascii=False)
        except (ValueError, TypeError, ArithmeticError) as e:
            logger.error("store.save.invalid_document", key=self.key, error=str(e))
            return False

        try:
            self.slot.write(self.key, payload, CURRENT_SCHEMA_VERSION)
        except SQLAlchemyError as e:
            logger.error("store.save.write_failed", key=self.key, error=str(e))
            return False

        logger.debug(
            "store.saved",
            key=self.key,
            entries=len(data.entries),
            stock=len(data.stock),
        )
        return True

    def clear(self) -> bool:
        """Remove the persisted document entirely."""
        try:
            self.slot.delete(self.key)
        except SQLAlchemyError as e:
            logger.error("store.clear.failed", key=self.key, error=str(e))
            return False
        logger.info("store.cleared", key=self.key)
        return True
