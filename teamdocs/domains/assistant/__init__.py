from teamdocs.domains.assistant.generators import TextGenerator, GeminiTextGenerator
from teamdocs.domains.assistant.schemas import (
    SummarizeRequest, SummaryResponse, TagsResponse, QuestionRequest, AnswerResponse
)
from teamdocs.domains.assistant.services import AssistantService

__all__ = [
    "TextGenerator", "GeminiTextGenerator",
    "SummarizeRequest", "SummaryResponse", "TagsResponse", "QuestionRequest", "AnswerResponse",
    "AssistantService"
]
