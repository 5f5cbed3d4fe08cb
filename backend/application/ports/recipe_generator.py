"""레시피 생성 포트"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List


@dataclass
class RecipeSuggestion:
    title: str
    description: str
    ingredients: List[str] = field(default_factory=list)
    steps: List[str] = field(default_factory=list)


class RecipeGeneratorPort(ABC):
    @abstractmethod
    async def generate(self, ingredients: str) -> List[RecipeSuggestion]: ...
