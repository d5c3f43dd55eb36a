"""
Бэкенды генерации текста для AI-функций.

GeminiTextGenerator обращается к Google Gemini через google-genai.
Ключ берется из настроек GEMINI_API_KEY; если он пуст, клиент google-genai
сам ищет GEMINI_API_KEY / GOOGLE_API_KEY в окружении.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class TextGenerator(ABC):
    """Внешний генератор текста: промпт на входе, текст (или JSON-текст) на выходе"""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        model: str,
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        ...


class GeminiTextGenerator(TextGenerator):
    """Генерация через Google Gemini API"""

    def __init__(self, api_key: str = ""):
        self.api_key = api_key
        self._client = None

    @property
    def client(self):
        # Клиент создается лениво: без ключа приложение должно стартовать
        if self._client is None:
            from google import genai

            self._client = genai.Client(api_key=self.api_key or None)
        return self._client

    async def generate(
        self,
        prompt: str,
        *,
        model: str,
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        from google.genai import types

        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json" if response_schema else None,
            response_schema=response_schema,
        )
        response = await self.client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=config,
        )
        return response.text or ""
