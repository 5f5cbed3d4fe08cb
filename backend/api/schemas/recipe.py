"""레시피 생성 스키마"""
from typing import List
from pydantic import BaseModel, Field


class GenerateRecipesRequest(BaseModel):
    ingredients: str = Field(..., min_length=1, max_length=1000)


class RecipeItem(BaseModel):
    title: str
    description: str
    ingredients: List[str]
    steps: List[str]

    class Config:
        from_attributes = True


class GenerateRecipesResponse(BaseModel):
    recipes: List[RecipeItem]
