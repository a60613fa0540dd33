"""
Base Firestore service with common CRUD operations

The Firestore client is synchronous, so every call runs in a worker thread
to keep the event loop free.
"""
import asyncio
import logging
from typing import List, Dict, Any, Optional, Iterable

from ...core.exceptions import PersistenceException, ResourceNotFoundException
from ...core.firebase_config import get_db

logger = logging.getLogger(__name__)


class FirestoreBaseService:
    """Base service for Firestore operations on one collection"""

    def __init__(self, collection_name: str, db=None):
        """
        Initialize base service

        Args:
            collection_name: Name of the Firestore collection
            db: Firestore client (defaults to the initialized app's client)
        """
        self.collection_name = collection_name
        self.db = db if db is not None else get_db()
        self.collection = self.db.collection(collection_name)

    @staticmethod
    def _to_dict(doc) -> Dict[str, Any]:
        data = doc.to_dict() or {}
        data['id'] = doc.id
        return data

    async def find_by_id(self, doc_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a document by ID

        Returns:
            Document data, or None when the document does not exist

        Raises:
            PersistenceException: If the read fails
        """
        try:
            doc = await asyncio.to_thread(self.collection.document(doc_id).get)
        except Exception as e:
            logger.error(f"Error retrieving document {doc_id} from {self.collection_name}: {str(e)}")
            raise PersistenceException(
                f"Failed to retrieve document from {self.collection_name}",
                details={"doc_id": doc_id, "error": str(e)}
            )

        if not doc.exists:
            return None
        return self._to_dict(doc)

    async def get_many(self, doc_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        """
        Batch-read documents by ID

        Returns:
            Mapping of ID to document data for the documents that exist
        """
        refs = [self.collection.document(doc_id) for doc_id in dict.fromkeys(doc_ids)]
        if not refs:
            return {}

        try:
            docs = await asyncio.to_thread(lambda: list(self.db.get_all(refs)))
        except Exception as e:
            logger.error(f"Error batch-reading {len(refs)} documents from {self.collection_name}: {str(e)}")
            raise PersistenceException(
                f"Failed to retrieve documents from {self.collection_name}",
                details={"error": str(e)}
            )

        return {doc.id: self._to_dict(doc) for doc in docs if doc.exists}

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a new document under an auto-generated ID

        Returns:
            Created document with ID

        Raises:
            PersistenceException: If creation fails
        """
        try:
            _, doc_ref = await asyncio.to_thread(self.collection.add, data)
            result_id = doc_ref.id
        except Exception as e:
            logger.error(f"Error creating document in {self.collection_name}: {str(e)}")
            raise PersistenceException(
                f"Failed to create document in {self.collection_name}",
                details={"error": str(e)}
            )

        logger.info(f"Created document {result_id} in {self.collection_name}")
        return {**data, 'id': result_id}

    async def update(self, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update an existing document

        Raises:
            ResourceNotFoundException: If document not found
            PersistenceException: If update fails
        """
        def apply_update():
            doc_ref = self.collection.document(doc_id)
            if not doc_ref.get().exists:
                raise ResourceNotFoundException(
                    f"Document not found in {self.collection_name}",
                    details={"doc_id": doc_id}
                )

            doc_ref.update(data)
            return self._to_dict(doc_ref.get())

        try:
            result = await asyncio.to_thread(apply_update)
        except ResourceNotFoundException:
            raise
        except Exception as e:
            logger.error(f"Error updating document {doc_id} in {self.collection_name}: {str(e)}")
            raise PersistenceException(
                f"Failed to update document in {self.collection_name}",
                details={"doc_id": doc_id, "error": str(e)}
            )

        logger.info(f"Updated document {doc_id} in {self.collection_name}")
        return result

    async def delete(self, doc_id: str) -> bool:
        """
        Delete a document

        Raises:
            PersistenceException: If deletion fails
        """
        try:
            await asyncio.to_thread(self.collection.document(doc_id).delete)
        except Exception as e:
            logger.error(f"Error deleting document {doc_id} from {self.collection_name}: {str(e)}")
            raise PersistenceException(
                f"Failed to delete document from {self.collection_name}",
                details={"doc_id": doc_id, "error": str(e)}
            )

        logger.info(f"Deleted document {doc_id} from {self.collection_name}")
        return True

    async def query(
        self,
        filters: List[tuple],
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Query documents with custom filters

        Args:
            filters: List of (field, operator, value) tuples
            limit: Maximum number of results

        Returns:
            List of matching documents

        Raises:
            PersistenceException: If query fails
        """
        try:
            query = self.collection

            for field, operator, value in filters:
                query = query.where(field, operator, value)

            if limit:
                query = query.limit(limit)

            docs = await asyncio.to_thread(lambda: list(query.stream()))
            results = [self._to_dict(doc) for doc in docs]

        except Exception as e:
            logger.error(f"Error querying {self.collection_name}: {str(e)}")
            raise PersistenceException(
                f"Failed to query {self.collection_name}",
                details={"error": str(e)}
            )

        logger.debug(f"Query returned {len(results)} documents from {self.collection_name}")
        return results
