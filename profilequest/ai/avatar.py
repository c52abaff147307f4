import base64
import logging
from typing import Optional, Tuple

import httpx

from profilequest.core.config import settings

logger = logging.getLogger(__name__)

DICEBEAR_PARAMS = {"size": "256", "shapeColor": "9F8383", "backgroundColor": "FFDAB3"}
SEED_MAX_LENGTH = 50


def split_data_url(image_base64: str) -> Tuple[str, str]:
    """Returns (base64_payload, mime_type) for a data URL or bare base64 string."""
    comma = image_base64.find(",")
    payload = image_base64[comma + 1:] if comma >= 0 else image_base64
    mime = "image/jpeg" if "image/jpeg" in image_base64[:max(comma, 0)] else "image/png"
    return payload, mime


def to_data_url(data: bytes | str, mime: str = "image/png") -> str:
    if isinstance(data, bytes):
        data = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{data}"


class AvatarService:
    """
    Avatar images for personas. Gemini image generation when a Google key is
    configured, DiceBear otherwise or when Gemini returns no image.
    """

    def __init__(self, api_key: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key or settings.GOOGLE_API_KEY
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS, transport=self.transport)

    async def generate(self, prompt: str, seed: str, image_base64: str = "") -> Tuple[str, str]:
        """Returns (data_url, used) with used in {"gemini", "dicebear", "none"}."""
        if self.api_key:
            image = await self._gemini_image(prompt, image_base64)
            if image:
                return image, "gemini"

        image = await self._dicebear_image(seed)
        if image:
            return image, "dicebear"
        return "", "none"

    async def _gemini_image(self, prompt: str, image_base64: str = "") -> Optional[str]:
        parts = [{"text": prompt}]
        if image_base64:
            data, mime = split_data_url(image_base64)
            parts.append({"inlineData": {"data": data, "mimeType": mime}})

        url = f"{settings.GEMINI_API_URL}/models/{settings.IMAGE_MODEL}:generateContent"
        body = {"contents": [{"role": "user", "parts": parts}]}
        try:
            async with self._client() as client:
                response = await client.post(url, params={"key": self.api_key}, json=body)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Gemini image generation failed, falling back: {e}")
            return None

        candidates = payload.get("candidates") or []
        if not candidates:
            return None
        for part in (candidates[0].get("content") or {}).get("parts") or []:
            inline = part.get("inlineData") or {}
            if inline.get("data"):
                return to_data_url(inline["data"], inline.get("mimeType") or "image/png")
        return None

    async def _dicebear_image(self, seed: str) -> Optional[str]:
        params = dict(DICEBEAR_PARAMS, seed=(seed or "seed")[:SEED_MAX_LENGTH])
        try:
            async with self._client() as client:
                response = await client.get(settings.DICEBEAR_URL, params=params)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"DiceBear avatar fetch failed: {e}")
            return None
        return to_data_url(response.content)


avatar_service = AvatarService()


def get_avatar_service() -> AvatarService:
    return avatar_service
