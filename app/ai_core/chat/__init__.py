from app.ai_core.chat.assistant import ChatAssistant

__all__ = ["ChatAssistant"]
