from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class EmojiCountEntry(BaseModel):
    emoji: str
    count: int
    percentage: int


class EmojiStats(BaseModel):
    total_emojis: int
    unique_emojis: int
    most_used: Optional[EmojiCountEntry] = None
    emoji_counts: List[EmojiCountEntry] = Field(default_factory=list)


class SentimentResult(BaseModel):
    sentiment: Literal["positive", "negative", "neutral"]
    score: float  # -1..1
    confidence: float  # 0..1


class AnalysisRecord(BaseModel):
    id: str
    user_id: str
    title: str
    content: str
    emoji_counts: Dict[str, int] = Field(default_factory=dict)
    total_emojis: int = 0
    created_at: datetime
    updated_at: datetime


class AnalyzeEmojiRequest(BaseModel):
    user_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    content: str


class UpdateEmojiTextRequest(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


class EmojiAnalysisResponse(BaseModel):
    emoji_text: AnalysisRecord
    stats: Optional[EmojiStats] = None
    sentiment: Optional[SentimentResult] = None
    insights: Optional[List[str]] = None


class DeleteResponse(BaseModel):
    success: bool
