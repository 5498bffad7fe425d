from fastapi import APIRouter, Depends
from tvog.modules.chat.gateway import AIGatewayClient, get_gateway_client
from tvog.modules.images.schemas import ImageGenerateRequest, ImageGenerateResponse
from tvog.modules.images.service import ImageService
from tvog.modules.messages.service import MessageService
from tvog.core.dependencies import get_user_supabase
from supabase import Client

router = APIRouter(prefix="/images", tags=["images"])


def get_image_service(gateway: AIGatewayClient = Depends(get_gateway_client)) -> ImageService:
    return ImageService(gateway)


@router.post("/generate", response_model=ImageGenerateResponse)
async def generate_image(
    request: ImageGenerateRequest,
    service: ImageService = Depends(get_image_service),
    supabase: Client = Depends(get_user_supabase)
):
    """Generate an image from a prompt"""
    return await service.generate(request, MessageService(supabase))
