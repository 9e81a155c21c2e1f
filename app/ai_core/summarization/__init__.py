from app.ai_core.summarization.thread_summarizer import ThreadSummarizer

__all__ = ["ThreadSummarizer"]
