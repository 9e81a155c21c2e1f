"""
Prompts for searching archived thread summaries.

The answer must be grounded in the retrieved summary documents only.
"""

from typing import List, Dict, Any, Optional


SEARCH_QUERY_PREFIX = "슬랙 스레드 요약과 관련하여: "

SEARCH_SYSTEM_PROMPT = """
당신은 저장된 슬랙 스레드 요약 문서를 검색하는 어시스턴트입니다. 제공된 문서의 내용만 사용해 답변하세요.

규칙:
1. 문서에 정보가 있으면: 해당 내용을 근거로 한국어로 답변하고, 근거가 된 문서 번호를 밝혀주세요
2. 문서에 정보가 없으면: "저장된 요약에서 관련 내용을 찾을 수 없습니다"라고만 답변하세요
3. 문서에 없는 추측이나 일반 지식을 덧붙이지 마세요
"""


def create_search_prompt(
    query: str,
    documents: List[Dict[str, Any]],
    doc_scores: Optional[Dict[str, float]] = None,
) -> str:
    """
    Create the retrieval-augmented prompt for a search query.

    Args:
        query: User's question, already prefixed
        documents: Retrieved summary documents with content
        doc_scores: Optional mapping of document path to relevance score

    Returns:
        Formatted prompt for the LLM
    """
    doc_scores = doc_scores or {}
    sections = [f"질문: {query}", "", "검색된 문서:"]

    for i, doc in enumerate(documents, 1):
        score = doc_scores.get(doc.get("path", ""))
        header = f"--- 문서 {i}: {doc.get('path', f'document-{i}')}"
        if score is not None:
            header += f" (관련도 {score:.2f})"
        sections.extend([header + " ---", doc.get("content", ""), "---", ""])

    sections.append("답변:")
    return "\n".join(sections)
