"""레시피 제안 생성기

시작 시점에 설정으로 구현을 한 번 고른다 (build_recipe_generator):
- ChatCompletionRecipeGenerator: Lovable AI 게이트웨이 또는 OpenAI
- FallbackRecipeGenerator: 키가 없을 때 고정 예시 반환 (서비스는 실패 대신 품질 저하)
"""
import json
import re
from typing import List, Optional, Any

import httpx
from loguru import logger

from application.ports.recipe_generator import RecipeGeneratorPort, RecipeSuggestion
from domain.exceptions import GatewayUnavailableError

LOVABLE_API_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
LOVABLE_MODEL = "google/gemini-2.5-flash"
OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"
OPENAI_MODEL = "gpt-4o-mini"

SYSTEM_PROMPT = (
    "You are a helpful cooking assistant. Generate 3-4 creative recipes based on the ingredients "
    "provided. Return ONLY valid JSON array with no markdown formatting. Each recipe must have: "
    "title, description (short summary), ingredients (array of strings with quantities), "
    "steps (array of instruction strings)."
)

_FENCE_RE = re.compile(r"```(?:json)?\n?|\n?```")


def parse_recipes(content: str) -> List[RecipeSuggestion]:
    """모델 응답 → RecipeSuggestion 목록. 파싱 불가면 빈 목록."""
    cleaned = _FENCE_RE.sub("", content or "").strip()
    try:
        data: Any = json.loads(cleaned or "[]")
    except json.JSONDecodeError:
        logger.warning("레시피 응답 JSON 파싱 실패")
        return []
    if isinstance(data, dict):
        data = data.get("recipes", [])
    if not isinstance(data, list):
        return []

    recipes = []
    for item in data:
        if not isinstance(item, dict) or not item.get("title"):
            continue
        recipes.append(RecipeSuggestion(
            title=str(item["title"]),
            description=str(item.get("description", "")),
            ingredients=[str(i) for i in item.get("ingredients") or []],
            steps=[str(s) for s in item.get("steps") or []],
        ))
    return recipes


class ChatCompletionRecipeGenerator(RecipeGeneratorPort):
    def __init__(self, api_key: str, api_url: str, model: str, timeout: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.timeout = timeout
        self._transport = transport

    async def generate(self, ingredients: str) -> List[RecipeSuggestion]:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user",
                 "content": f"Generate recipes using these ingredients: {ingredients}. Return as JSON array only."},
            ],
            "temperature": 0.7,
        }
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(self.api_url, headers=headers, json=payload)
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as e:
                logger.error(f"AI API 오류 {e.response.status_code}: {e.response.text}")
                raise GatewayUnavailableError("레시피 생성 실패")
            except (httpx.RequestError, ValueError) as e:
                logger.error(f"AI API 호출 실패: {e}")
                raise GatewayUnavailableError("레시피 생성 실패")

        content = _message_content(data)
        if content is None:
            logger.error(f"AI API 응답 형식 오류: {str(data)[:200]}")
            raise GatewayUnavailableError("레시피 생성 실패")
        recipes = parse_recipes(content)
        logger.info(f"레시피 생성: {len(recipes)}건 ({self.model})")
        return recipes


def _message_content(data) -> Optional[str]:
    """chat completion 응답에서 첫 메시지 본문. 형식이 다르면 None"""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices") or [{}]
    if not isinstance(choices, list) or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message") or {}
    if not isinstance(message, dict):
        return None
    return message.get("content") or "[]"


class FallbackRecipeGenerator(RecipeGeneratorPort):
    """키 미설정 환경용 고정 응답"""

    async def generate(self, ingredients: str) -> List[RecipeSuggestion]:
        items = [i.strip() for i in (ingredients or "").split(",") if i.strip()] or ["pantry staples"]
        listed = ", ".join(items)
        return [
            RecipeSuggestion(
                title="Simple Skillet",
                description=f"A quick one-pan dish with {listed}.",
                ingredients=[f"{item} (to taste)" for item in items] + ["1 tbsp olive oil", "salt and pepper"],
                steps=["Heat the oil in a large pan.",
                       f"Add {listed} and cook for 8-10 minutes, stirring often.",
                       "Season with salt and pepper and serve warm."],
            ),
            RecipeSuggestion(
                title="Fresh Bowl",
                description=f"A light bowl built around {listed}.",
                ingredients=[f"{item} (chopped)" for item in items] + ["1 lemon", "fresh herbs"],
                steps=["Chop all ingredients into bite-sized pieces.",
                       "Toss with lemon juice and herbs.",
                       "Serve immediately."],
            ),
        ]


def build_recipe_generator(settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> RecipeGeneratorPort:
    if settings.LOVABLE_API_KEY:
        logger.info("레시피 생성기: Lovable AI 게이트웨이")
        return ChatCompletionRecipeGenerator(settings.LOVABLE_API_KEY, LOVABLE_API_URL, LOVABLE_MODEL,
                                             timeout=settings.AI_TIMEOUT, transport=transport)
    if settings.OPENAI_API_KEY:
        logger.info("레시피 생성기: OpenAI")
        return ChatCompletionRecipeGenerator(settings.OPENAI_API_KEY, OPENAI_API_URL, OPENAI_MODEL,
                                             timeout=settings.AI_TIMEOUT, transport=transport)
    logger.warning("AI API 키 미설정 - 고정 레시피 응답 사용")
    return FallbackRecipeGenerator()
