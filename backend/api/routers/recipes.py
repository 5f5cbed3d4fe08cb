"""레시피 제안 라우터"""
from fastapi import APIRouter, Depends

from application.ports.recipe_generator import RecipeGeneratorPort
from api.schemas.recipe import GenerateRecipesRequest, RecipeItem, GenerateRecipesResponse
from api.dependencies import get_recipe_generator

router = APIRouter(prefix="/api/recipes", tags=["레시피"])


@router.post("/generate", response_model=GenerateRecipesResponse)
async def generate_recipes(request: GenerateRecipesRequest,
                           generator: RecipeGeneratorPort = Depends(get_recipe_generator)):
    """재료 목록으로 레시피 3~4개 제안"""
    recipes = await generator.generate(request.ingredients)
    return GenerateRecipesResponse(recipes=[RecipeItem.model_validate(r) for r in recipes])
