from fastapi import APIRouter, Depends, HTTPException, status

from teamdocs.api.deps import get_assistant_service, get_current_user, get_document_service
from teamdocs.core.errors import UpstreamError
from teamdocs.domains.assistant.schemas import (
    SummarizeRequest, SummaryResponse, TagsResponse, QuestionRequest, AnswerResponse
)
from teamdocs.domains.assistant.services import AssistantService
from teamdocs.domains.documents.services import DocumentService
from teamdocs.domains.identity.entities import User

router = APIRouter(prefix="/ai", tags=["ai"])


def _upstream_failure(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


@router.post("/summarize", response_model=SummaryResponse)
async def summarize(
    request: SummarizeRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service)
):
    """Генерация краткого описания документа"""
    try:
        summary = await assistant.summarize(request.title, request.content)
    except UpstreamError:
        raise _upstream_failure("Failed to generate summary")
    return SummaryResponse(summary=summary)


@router.post("/generate-tags", response_model=TagsResponse)
async def generate_tags(
    request: SummarizeRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service)
):
    """Генерация тегов документа"""
    try:
        tags = await assistant.generate_tags(request.title, request.content)
    except UpstreamError:
        raise _upstream_failure("Failed to generate tags")
    return TagsResponse(tags=tags)


@router.post("/qa", response_model=AnswerResponse)
async def answer_question(
    request: QuestionRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service),
    document_service: DocumentService = Depends(get_document_service)
):
    """Ответ на вопрос по всем документам"""
    documents = await document_service.list_documents()
    try:
        answer = await assistant.answer(request.question, documents)
    except UpstreamError:
        raise _upstream_failure("Failed to generate answer")
    return AnswerResponse(answer=answer)
