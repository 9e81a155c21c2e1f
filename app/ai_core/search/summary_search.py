"""
Summary Search Module

Retrieval-augmented search over previously archived thread summaries:
1. Retrieve summary documents from the knowledge-base path in the archive repo
2. Rank them by keyword relevance (normalized to 0.0-1.0)
3. Let the LLM answer from the top documents only
"""

import logging
import re
from typing import Any, Dict, List, Tuple

from app.ai_core.llm import TextGenerator
from app.ai_core.prompts.query import (
    SEARCH_QUERY_PREFIX,
    SEARCH_SYSTEM_PROMPT,
    create_search_prompt,
)
from app.config import Settings
from app.integrations.github import GitHubObjectStore
from app.models.api_responses import SearchResult, SearchSource
from app.models.results import SearchError

logger = logging.getLogger(__name__)

STOP_WORDS = {
    "the", "a", "an", "and", "or", "is", "are", "in", "to", "for", "of", "with",
    "how", "what", "when", "where", "why", "do", "that", "this", "which", "who",
    "그", "이", "저", "및", "또는", "어떻게", "무엇", "언제", "어디", "왜",
}

SNIPPET_LENGTH = 200


class SummarySearcher:
    """Search client over archived summaries."""

    def __init__(
        self, settings: Settings, generator: TextGenerator, store: GitHubObjectStore
    ):
        self.generator = generator
        self.store = store
        self.knowledge_base_path = settings.knowledge_base_path
        self.max_documents = settings.search_max_documents
        self.temperature = settings.summary_temperature
        self.max_tokens = settings.summary_max_tokens

    @property
    def is_configured(self) -> bool:
        return bool(self.knowledge_base_path)

    async def query(self, text: str) -> SearchResult:
        """
        Answer a question from archived summaries.

        Returns SearchResult.unavailable() when no knowledge base is configured.

        Raises:
            SearchError: If retrieval or generation fails
        """
        if not self.is_configured:
            logger.warning("KNOWLEDGE_BASE_PATH is not set, skipping summary search")
            return SearchResult.unavailable()

        return await self.retrieve_and_generate(
            f"{SEARCH_QUERY_PREFIX}{text}", self.knowledge_base_path
        )

    async def retrieve_and_generate(
        self, query: str, knowledge_base_id: str
    ) -> SearchResult:
        """
        Retrieve documents under `knowledge_base_id` and generate an answer.

        Args:
            query: Full query sent to the model
            knowledge_base_id: Repository path holding the summary documents

        Returns:
            SearchResult with answer and cited sources; empty answer if the
            knowledge base holds no documents
        """
        try:
            documents = await self.store.list_documents(knowledge_base_id)
        except Exception as e:
            logger.error(f"Failed to retrieve summaries: {e}", exc_info=True)
            raise SearchError(f"요약 문서를 불러오지 못했습니다: {str(e)}") from e

        if not documents:
            logger.info(f"No summaries under {knowledge_base_id}")
            return SearchResult(answer="", sources=[])

        terms = query.removeprefix(SEARCH_QUERY_PREFIX)
        scored_docs = self.compute_document_relevance(terms, documents)
        relevant = [(doc, score) for doc, score in scored_docs if score > 0]
        if not relevant:
            relevant = scored_docs
        relevant = relevant[: self.max_documents]

        logger.info(
            f"Passing {len(relevant)} of {len(documents)} summaries to LLM for '{terms}'"
        )

        doc_scores = {doc["path"]: score for doc, score in relevant}
        prompt = create_search_prompt(query, [doc for doc, _ in relevant], doc_scores)

        try:
            answer = await self.generator.generate(
                prompt,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system_instruction=SEARCH_SYSTEM_PROMPT,
            )
        except Exception as e:
            logger.error(f"Error generating search answer: {e}", exc_info=True)
            raise SearchError(f"검색 답변 생성 중 오류 발생: {str(e)}") from e

        sources = [
            SearchSource(
                content=self._snippet(doc.get("content", "")) or None,
                location=doc.get("locator"),
                score=score,
            )
            for doc, score in relevant
        ]
        return SearchResult(answer=answer, sources=sources)

    @staticmethod
    def compute_document_relevance(
        query: str, documents: List[Dict[str, Any]]
    ) -> List[Tuple[Dict[str, Any], float]]:
        """
        Score documents by keyword overlap, normalized so the best one is 1.0.

        Returns:
            (document, score) tuples sorted by score, highest first
        """
        query_lower = query.lower().strip()
        keywords = set(re.findall(r"\w+", query_lower)) - STOP_WORDS

        raw_scores = []
        for doc in documents:
            content = doc.get("content", "").lower()
            metadata = doc.get("metadata") or {}
            title = f"{doc.get('path', '')} {metadata.get('fileName', '')}".lower()
            participants = str(metadata.get("participants", "")).lower()

            score = 0.0
            if query_lower and query_lower in content:
                score += 1.0
            for keyword in keywords:
                if keyword in title:
                    score += 0.5
                if keyword in content:
                    score += 0.15
                if keyword in participants:
                    score += 0.25
            raw_scores.append((doc, score))

        best = max((score for _, score in raw_scores), default=0.0)
        normalized = [
            (doc, round(score / best, 4) if best > 0 else 0.0) for doc, score in raw_scores
        ]
        return sorted(normalized, key=lambda item: item[1], reverse=True)

    @staticmethod
    def _snippet(content: str) -> str:
        content = content.strip()
        if len(content) > SNIPPET_LENGTH:
            return content[:SNIPPET_LENGTH] + "..."
        return content
