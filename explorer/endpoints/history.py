# Endpoints for saving, listing and clearing a user's chat history
# explorer/endpoints/history.py
from fastapi import APIRouter, Depends
from typing import List

from explorer.models.chat import ChatMessage, HistoryRecord
from explorer.services.chat_history import ChatHistoryService, get_chat_history_service
from explorer.utils.logger import logger

router = APIRouter(
    prefix="/history",
    tags=["History"]
)

@router.post("/{user_id}", response_model=dict)
async def save_message(user_id: str, message: ChatMessage, history: ChatHistoryService = Depends(get_chat_history_service)):
    message_id = await history.save_message(user_id, message)
    return {"id": message_id}

@router.get("/{user_id}", response_model=List[HistoryRecord])
async def get_history(user_id: str, history: ChatHistoryService = Depends(get_chat_history_service)):
    logger.debug(f"Fetching chat history for user_id: {user_id}")
    return await history.get_history(user_id)

@router.delete("/{user_id}", response_model=dict)
async def clear_history(user_id: str, history: ChatHistoryService = Depends(get_chat_history_service)):
    deleted = await history.clear_history(user_id)
    return {"deleted": deleted}
