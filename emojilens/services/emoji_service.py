"""
Emoji extraction, statistics, sentiment and insight generation.

All functions here are pure: they take text or counts and return fresh
results, so request handlers can call them concurrently without coordination.
"""
import math
import re
from collections import Counter
from typing import Dict, List, Mapping

from emojilens.schemas.emoji import EmojiCountEntry, EmojiStats, SentimentResult
from emojilens.services.emoji_lexicon import (
    CATEGORY_MEMBERS,
    EMOJI_CATEGORIES,
    NEGATIVE_EMOJIS,
    POPULAR_EMOJIS,
    POSITIVE_EMOJIS,
)

# One code point per match; ZWJ sequences and modifiers are counted piecewise.
EMOJI_RE = re.compile(
    "["
    "\U0001F600-\U0001F64F"  # emoticons
    "\U0001F300-\U0001F5FF"  # symbols & pictographs
    "\U0001F680-\U0001F6FF"  # transport & map
    "\U0001F1E0-\U0001F1FF"  # flags
    "\u2600-\u26FF"  # misc symbols
    "\u2700-\u27BF"  # dingbats
    "\U0001F900-\U0001F9FF"  # supplemental symbols & pictographs
    "\U0001F018-\U0001F270"
    "\u238C"
    "\u2194-\u2199"
    "\u21A9-\u21AA"
    "\u231A-\u231B"
    "\u23E9-\u23F3"
    "\u25FD-\u25FE"
    "\u2B1B-\u2B1C"
    "\u2B50"
    "\u2B55"
    "]"
)
WHITESPACE_RUN_RE = re.compile(r"[ \t]+")

POSITIVE_THRESHOLD = 0.3
CONFIDENCE_CAP = 0.95
NEUTRAL_CONFIDENCE_FLOOR = 0.1


def _percentage(count: int, total: int) -> int:
    # Half-up rounding; Python's round() would send 12.5 to 12.
    if total <= 0:
        return 0
    return int(math.floor(count / total * 100 + 0.5))


def clean_text(text: str) -> str:
    """Collapse runs of spaces/tabs and trim. Line breaks are kept."""
    return WHITESPACE_RUN_RE.sub(" ", text).strip()


def extract_emojis(text: str) -> Dict[str, int]:
    """Count every recognized emoji code point in ``text``."""
    return dict(Counter(EMOJI_RE.findall(text)))


def total_count(emoji_counts: Mapping[str, int]) -> int:
    return sum(emoji_counts.values())


def generate_stats(emoji_counts: Mapping[str, int]) -> EmojiStats:
    """
    Rank emoji counts and compute their share of the total.

    Entries are ordered by count descending; equal counts fall back to
    ascending code point so the ranking is stable across runs.
    """
    total = total_count(emoji_counts)
    ranked = sorted(emoji_counts.items(), key=lambda kv: (-kv[1], kv[0]))
    entries = [
        EmojiCountEntry(emoji=emoji, count=count, percentage=_percentage(count, total))
        for emoji, count in ranked
    ]
    return EmojiStats(
        total_emojis=total,
        unique_emojis=len(entries),
        most_used=entries[0] if entries else None,
        emoji_counts=entries,
    )


def analyze_sentiment(emoji_counts: Mapping[str, int]) -> SentimentResult:
    """Coarse positive/negative/neutral reading of emoji usage."""
    positive = negative = total = 0
    for emoji, count in emoji_counts.items():
        total += count
        if emoji in POSITIVE_EMOJIS:
            positive += count
        elif emoji in NEGATIVE_EMOJIS:
            negative += count

    if total == 0:
        return SentimentResult(sentiment="neutral", score=0, confidence=0)

    positive_ratio = positive / total
    negative_ratio = negative / total

    if positive_ratio > negative_ratio and positive_ratio > POSITIVE_THRESHOLD:
        return SentimentResult(
            sentiment="positive",
            score=positive_ratio,
            confidence=min(CONFIDENCE_CAP, positive_ratio * 2),
        )
    if negative_ratio > positive_ratio and negative_ratio > POSITIVE_THRESHOLD:
        return SentimentResult(
            sentiment="negative",
            score=-negative_ratio,
            confidence=min(CONFIDENCE_CAP, negative_ratio * 2),
        )
    return SentimentResult(
        sentiment="neutral",
        score=0,
        confidence=max(NEUTRAL_CONFIDENCE_FLOOR, 1 - positive_ratio - negative_ratio),
    )


def _top_category(stats: EmojiStats) -> str:
    usage: Dict[str, int] = {}
    for entry in stats.emoji_counts:
        for category, members in CATEGORY_MEMBERS.items():
            if entry.emoji in members:
                usage[category] = usage.get(category, 0) + entry.count

    best = ""
    best_count = 0
    # Strict comparison keeps the earliest category on ties.
    for category in EMOJI_CATEGORIES:
        if usage.get(category, 0) > best_count:
            best, best_count = category, usage[category]
    return best


def generate_insights(stats: EmojiStats) -> List[str]:
    insights: List[str] = []
    total = stats.total_emojis
    unique = stats.unique_emojis

    if total == 0:
        insights.append(
            "No emojis found in the text. Consider adding some emojis to make "
            "your message more expressive! 😊"
        )
        return insights

    if total == 1:
        insights.append("You used 1 emoji. Adding more emojis can make your text more engaging!")
    elif total < 5:
        insights.append(
            f"You used {total} emojis. That's a nice balance for keeping text expressive but readable."
        )
    elif total < 20:
        insights.append(f"You used {total} emojis. Your text is quite expressive!")
    else:
        insights.append(f"Wow! You used {total} emojis. Your text is super expressive! 🎉")

    most_used = stats.most_used
    if unique == 1:
        emoji = most_used.emoji if most_used else ""
        insights.append(
            f"You only used one type of emoji ({emoji}). Try mixing different emojis for more variety!"
        )
    elif unique < total / 3:
        insights.append(f"You used {unique} different emojis. You tend to repeat your favorite emojis!")
    else:
        insights.append(f"You used {unique} different emojis. Great variety in your emoji usage!")

    if most_used and most_used.percentage > 50:
        insights.append(
            f"{most_used.emoji} is clearly your favorite emoji, making up "
            f"{most_used.percentage}% of all emojis used!"
        )
    elif most_used and most_used.percentage > 30:
        insights.append(
            f"{most_used.emoji} is your most used emoji at {most_used.percentage}% of total usage."
        )

    category = _top_category(stats)
    if category:
        insights.append(f'You prefer "{category}" emojis the most!')

    return insights


def get_popular_emojis() -> List[str]:
    return list(POPULAR_EMOJIS)


def get_emoji_categories() -> Dict[str, List[str]]:
    return {name: list(glyphs) for name, glyphs in EMOJI_CATEGORIES.items()}
