from app.ai_core.search.summary_search import SummarySearcher

__all__ = ["SummarySearcher"]
