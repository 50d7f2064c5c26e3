import asyncio

from fastapi import APIRouter, HTTPException, Request, status

from jobfit.core.rate_limit import rate_limit
from jobfit.schemas.analysis import AnalyzeRequest, AnalyzeResponse
from jobfit.services.analysis_llm import AnalysisLLMError
from jobfit.services.analysis_service import AnalysisInputError, analyze

router = APIRouter()


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    summary="Analyze resume fit",
    description="Score a resume against a job description and an optional pair of salary ranges.",
)
@rate_limit()
async def analyze_fit(request: Request, payload: AnalyzeRequest):
    _ = request
    try:
        return await asyncio.to_thread(analyze, payload)
    except AnalysisInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except AnalysisLLMError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
