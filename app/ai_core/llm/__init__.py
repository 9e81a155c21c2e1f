from app.ai_core.llm.text_generator import TextGenerator, EmptyResponseError

__all__ = ["TextGenerator", "EmptyResponseError"]
