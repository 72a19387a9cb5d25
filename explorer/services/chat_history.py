# Chat history logging to Firestore; independent of the generation path
# explorer/services/chat_history.py
from typing import List

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from explorer.models.chat import ChatMessage, HistoryRecord
from explorer.utils.config import Settings, settings
from explorer.utils.firestore import get_firestore_client
from explorer.utils.logger import logger

# Firestore caps a single write batch at 500 operations.
MAX_BATCH_WRITES = 500


class ChatHistoryService:
    def __init__(self, client, config: Settings):
        self.client = client
        self.collection_name = config.chat_history_collection
        self.history_limit = config.history_limit

    def _user_query(self, user_id: str):
        return self.client.collection(self.collection_name).where(filter=FieldFilter("userId", "==", user_id))

    async def save_message(self, user_id: str, message: ChatMessage) -> str:
        """Appends a message with a server-side timestamp and returns the new document id."""
        _, doc_ref = await self.client.collection(self.collection_name).add(
            {
                "userId": user_id,
                "message": message.model_dump(mode="json", exclude_none=True),
                "timestamp": firestore.SERVER_TIMESTAMP,
            }
        )
        logger.debug(f"Saved {message.type.value} message {doc_ref.id} for user {user_id}")
        return doc_ref.id

    async def get_history(self, user_id: str) -> List[HistoryRecord]:
        """Returns the user's most recent records, newest first."""
        query = (
            self._user_query(user_id)
            .order_by("timestamp", direction=firestore.Query.DESCENDING)
            .limit(self.history_limit)
        )
        records = []
        async for doc in query.stream():
            data = doc.to_dict() or {}
            records.append(
                HistoryRecord(
                    id=doc.id,
                    user_id=data.get("userId", user_id),
                    message=data.get("message", {}),
                    timestamp=data.get("timestamp"),
                )
            )
        return records

    async def clear_history(self, user_id: str) -> int:
        """Deletes every record of the user and returns how many were removed."""
        docs = [doc async for doc in self._user_query(user_id).stream()]
        for offset in range(0, len(docs), MAX_BATCH_WRITES):
            batch = self.client.batch()
            for doc in docs[offset:offset + MAX_BATCH_WRITES]:
                batch.delete(doc.reference)
            await batch.commit()
        logger.info(f"Cleared {len(docs)} history records for user {user_id}")
        return len(docs)


_chat_history_service: ChatHistoryService | None = None


def get_chat_history_service() -> ChatHistoryService:
    """FastAPI dependency returning the process-wide ChatHistoryService."""
    global _chat_history_service
    if _chat_history_service is None:
        _chat_history_service = ChatHistoryService(get_firestore_client(), settings)
    return _chat_history_service
