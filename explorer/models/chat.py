# Data models for chat history records
# explorer/models/chat.py
from datetime import datetime
from pydantic import BaseModel
from typing import List, Optional

from explorer.models.enums import MessageType
from explorer.models.explore import StreamTopic
from explorer.models.question import Question

class ChatMessage(BaseModel):
    type: MessageType
    content: Optional[str] = None
    topics: Optional[List[StreamTopic]] = None
    questions: Optional[List[Question]] = None

class HistoryRecord(BaseModel):
    id: str
    user_id: str
    message: ChatMessage
    timestamp: datetime | None = None
