from fastapi import APIRouter, Depends
from tvog.modules.analysis.schemas import (
    FileAnalysisRequest, FileAnalysisResponse, MessageAnalysisResponse
)
from tvog.modules.analysis.service import AnalysisService
from tvog.modules.chat.gateway import AIGatewayClient, get_gateway_client
from tvog.modules.files.service import FileService
from tvog.modules.messages.service import MessageService
from tvog.core.dependencies import get_current_user, get_user_supabase
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/analysis", tags=["analysis"])


def get_analysis_service(gateway: AIGatewayClient = Depends(get_gateway_client)) -> AnalysisService:
    return AnalysisService(gateway)


@router.post("/file", response_model=FileAnalysisResponse)
async def analyze_file(
    request: FileAnalysisRequest,
    user_data: Dict = Depends(get_current_user),
    service: AnalysisService = Depends(get_analysis_service)
):
    """Analyze a file reachable at `file_url`"""
    return FileAnalysisResponse(analysis=await service.analyze(request))


@router.post("/messages/{message_id}", response_model=MessageAnalysisResponse)
async def analyze_message_attachment(
    message_id: str,
    service: AnalysisService = Depends(get_analysis_service),
    supabase: Client = Depends(get_user_supabase)
):
    """Analyze the attachment of a message and post the analysis to its conversation"""
    return await service.analyze_message(message_id, MessageService(supabase), FileService(supabase))
