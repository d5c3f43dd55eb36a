import json
import logging
from typing import Any, List, Optional, Sequence, Tuple

from teamdocs.core.config import Settings
from teamdocs.core.errors import UpstreamError
from teamdocs.domains.assistant.generators import TextGenerator
from teamdocs.domains.documents.entities import DocumentWithUser

logger = logging.getLogger(__name__)

SUMMARY_FALLBACK = "Unable to generate summary"
ANSWER_FALLBACK = "I'm unable to provide an answer based on the available documents."

TAGS_SYSTEM_PROMPT = """You are a document tagging expert. Generate relevant tags for the given document content.
Return only a JSON array of 3-7 relevant tags as strings. Tags should be concise, relevant, and help with categorization.
Example format: ["react", "frontend", "javascript", "tutorial"]"""

TAGS_SCHEMA = {"type": "ARRAY", "items": {"type": "STRING"}}

RANKING_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "index": {"type": "INTEGER"},
            "relevance": {"type": "NUMBER"},
        },
        "required": ["index", "relevance"],
    },
}

# Сколько символов текста документа уходит в промпт ранжирования
RANKING_EXCERPT_CHARS = 500


def parse_json_response(text: str) -> Any:
    """Разбор JSON из ответа модели, допускает обрамление ```json ... ```"""
    text = (text or "").strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise UpstreamError("Unparsable response from text generator") from e


class AssistantService:
    """AI-функции поверх генератора текста: описание, теги, ранжирование, ответы"""

    def __init__(self, generator: TextGenerator, settings: Settings):
        self.generator = generator
        self.settings = settings

    async def summarize(self, title: str, content: str) -> str:
        """Краткое описание документа в 2-3 предложениях"""
        prompt = f"""Please create a concise, informative summary of the following document:

Title: {title}

Content: {content}

Provide a summary that captures the key points and main ideas in 2-3 sentences."""

        text = await self._generate(prompt, model=self.settings.gemini_fast_model)
        return text.strip() or SUMMARY_FALLBACK

    async def generate_tags(self, title: str, content: str) -> List[str]:
        """Теги для документа"""
        prompt = f"""Title: {title}

Content: {content}

Generate relevant tags for this document:"""

        text = await self._generate(
            prompt,
            model=self.settings.gemini_fast_model,
            system_instruction=TAGS_SYSTEM_PROMPT,
            response_schema=TAGS_SCHEMA,
        )
        if not text.strip():
            return []

        tags = parse_json_response(text)
        if not isinstance(tags, list):
            raise UpstreamError("Expected a JSON array of tags")
        return [str(tag).strip() for tag in tags if str(tag).strip()]

    async def rank_by_semantic_relevance(
        self,
        query: str,
        documents: Sequence[DocumentWithUser],
    ) -> List[Tuple[DocumentWithUser, int]]:
        """Документы, отсортированные по смысловой близости к запросу.

        Модель оценивает каждый документ от 0 до 100; в результат попадают
        оценки выше semantic_relevance_threshold.
        """
        if not documents:
            return []

        listing = "\n".join(
            f"""Document {index}:
Title: {item.document.title}
Content: {item.document.content[:RANKING_EXCERPT_CHARS]}...
Summary: {item.document.summary or "No summary"}
Tags: {", ".join(item.document.tags) or "No tags"}
---"""
            for index, item in enumerate(documents)
        )
        prompt = f"""Given the search query: "{query}"

Analyze these documents and return a relevance score (0-100) for each document based on semantic similarity to the query. Consider not just keyword matches but conceptual relevance.

Documents:
{listing}

Return a JSON array with the document index and relevance score:
Format: [{{"index": 0, "relevance": 85}}, {{"index": 1, "relevance": 42}}, ...]"""

        text = await self._generate(
            prompt,
            model=self.settings.gemini_pro_model,
            response_schema=RANKING_SCHEMA,
        )
        if not text.strip():
            return []

        scores = parse_json_response(text)
        if not isinstance(scores, list):
            raise UpstreamError("Expected a JSON array of relevance scores")

        best = {}
        for score in scores:
            try:
                index = int(score["index"])
                relevance = int(round(float(score["relevance"])))
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Skipping malformed relevance entry: {score!r}")
                continue
            if not 0 <= index < len(documents):
                continue
            if relevance > self.settings.semantic_relevance_threshold:
                best[index] = max(relevance, best.get(index, relevance))

        ranked = sorted(best.items(), key=lambda pair: pair[1], reverse=True)
        return [(documents[index], relevance) for index, relevance in ranked]

    async def answer(self, question: str, documents: Sequence[DocumentWithUser]) -> str:
        """Ответ на вопрос по базе знаний со ссылками на документы"""
        context = "\n".join(
            f"""
Document: {item.document.title}
Content: {item.document.content}
Summary: {item.document.summary or "No summary"}
Author: {item.author.name or "Unknown"}
Tags: {", ".join(item.document.tags) or "No tags"}
---"""
            for item in documents
        )
        prompt = f"""You are an AI assistant helping users find information from their team's knowledge base.
Use the provided documents to answer the user's question accurately and helpfully.

Question: {question}

Available Documents:
{context}

Instructions:
1. Answer the question based on the provided documents
2. If the information is available, provide a comprehensive answer
3. If information is partially available, provide what you can and indicate what's missing
4. If no relevant information is found, clearly state that the information is not available in the knowledge base
5. Always cite which document(s) you're referencing in your answer
6. Keep your response conversational and helpful

Answer:"""

        text = await self._generate(prompt, model=self.settings.gemini_pro_model)
        return text.strip() or ANSWER_FALLBACK

    async def _generate(
        self,
        prompt: str,
        *,
        model: str,
        system_instruction: Optional[str] = None,
        response_schema: Optional[dict] = None,
    ) -> str:
        try:
            return await self.generator.generate(
                prompt,
                model=model,
                system_instruction=system_instruction,
                response_schema=response_schema,
            )
        except Exception as e:
            logger.error(f"Text generation failed (model={model}): {e}")
            raise UpstreamError(f"Text generation failed: {e}") from e
