from typing import List

from pydantic import BaseModel, Field


class SummarizeRequest(BaseModel):
    """Заголовок и текст для генерации описания или тегов"""
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)


class SummaryResponse(BaseModel):
    summary: str


class TagsResponse(BaseModel):
    tags: List[str]


class QuestionRequest(BaseModel):
    question: str = Field(..., min_length=1, max_length=2000)


class AnswerResponse(BaseModel):
    answer: str
