import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException

from emojilens.api.deps import get_storage
from emojilens.schemas.emoji import (
    AnalysisRecord,
    AnalyzeEmojiRequest,
    DeleteResponse,
    EmojiAnalysisResponse,
    UpdateEmojiTextRequest,
)
from emojilens.services import emoji_service
from emojilens.services.storage import MemStorage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["emoji"])


def _analysis(record: AnalysisRecord) -> EmojiAnalysisResponse:
    stats = emoji_service.generate_stats(record.emoji_counts)
    return EmojiAnalysisResponse(
        emoji_text=record,
        stats=stats,
        sentiment=emoji_service.analyze_sentiment(record.emoji_counts),
        insights=emoji_service.generate_insights(stats),
    )


@router.post("/analyze-emoji", response_model=EmojiAnalysisResponse)
def analyze_emoji(
    request: AnalyzeEmojiRequest, store: MemStorage = Depends(get_storage)
) -> EmojiAnalysisResponse:
    content = emoji_service.clean_text(request.content)
    counts = emoji_service.extract_emojis(content)
    record = store.create_analysis(
        user_id=request.user_id,
        title=request.title,
        content=content,
        emoji_counts=counts,
        total_emojis=emoji_service.total_count(counts),
    )
    logger.info(f"Stored emoji analysis {record.id}: {record.total_emojis} emojis, {len(counts)} unique")
    return _analysis(record)


@router.get("/user/{user_id}/emoji-texts", response_model=List[AnalysisRecord])
def list_emoji_texts(user_id: str, store: MemStorage = Depends(get_storage)) -> List[AnalysisRecord]:
    return store.get_analyses_by_user(user_id)


@router.get("/emoji-text/{analysis_id}", response_model=AnalysisRecord)
def get_emoji_text(analysis_id: str, store: MemStorage = Depends(get_storage)) -> AnalysisRecord:
    record = store.get_analysis(analysis_id)
    if not record:
        raise HTTPException(status_code=404, detail="Emoji text not found")
    return record


@router.put("/emoji-text/{analysis_id}", response_model=EmojiAnalysisResponse)
def update_emoji_text(
    analysis_id: str,
    request: UpdateEmojiTextRequest,
    store: MemStorage = Depends(get_storage),
) -> EmojiAnalysisResponse:
    """
    Edit an analysis. A new content re-derives the emoji counts and returns a
    fresh analysis; a title-only edit leaves the counts alone.
    """
    if not request.title and not request.content:
        raise HTTPException(status_code=400, detail="Title or content is required")

    if request.content:
        content = emoji_service.clean_text(request.content)
        counts = emoji_service.extract_emojis(content)
        record = store.update_analysis(
            analysis_id,
            title=request.title or None,
            content=content,
            emoji_counts=counts,
            total_emojis=emoji_service.total_count(counts),
        )
    else:
        record = store.update_analysis(analysis_id, title=request.title)

    if not record:
        raise HTTPException(status_code=404, detail="Emoji text not found")

    if request.content:
        return _analysis(record)
    return EmojiAnalysisResponse(emoji_text=record)


@router.delete("/emoji-text/{analysis_id}", response_model=DeleteResponse)
def delete_emoji_text(analysis_id: str, store: MemStorage = Depends(get_storage)) -> DeleteResponse:
    if not store.delete_analysis(analysis_id):
        raise HTTPException(status_code=404, detail="Emoji text not found")
    return DeleteResponse(success=True)


@router.get("/popular-emojis", response_model=List[str])
def popular_emojis() -> List[str]:
    return emoji_service.get_popular_emojis()


@router.get("/emoji-categories", response_model=Dict[str, List[str]])
def emoji_categories() -> Dict[str, List[str]]:
    return emoji_service.get_emoji_categories()
