from fastapi import APIRouter, HTTPException, status

from jobfit.core.scoring_config import get_lexicon
from jobfit.services.analysis_llm import analysis_llm_enabled

router = APIRouter()

@router.get("/health", summary="Health Check", description="Check that scoring config loads and report the narrative mode.")
async def health_check():
    try:
        get_lexicon()
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return {"status": "healthy", "narrative": "llm" if analysis_llm_enabled() else "heuristic"}
