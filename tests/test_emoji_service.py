import pytest

from emojilens.schemas.emoji import EmojiCountEntry, EmojiStats
from emojilens.services.emoji_service import (
    analyze_sentiment,
    clean_text,
    extract_emojis,
    generate_insights,
    generate_stats,
    get_emoji_categories,
    get_popular_emojis,
)


def test_extract_counts_each_emoji():
    assert extract_emojis("I love 😊😊 and 🎉!") == {"😊": 2, "🎉": 1}


def test_extract_empty_and_plain_text():
    assert extract_emojis("") == {}
    assert extract_emojis("no emojis here, just text :)") == {}


def test_extract_is_idempotent():
    text = "🚀 launch 🚀 day ☕ ⭐"
    assert extract_emojis(text) == extract_emojis(text) == {"🚀": 2, "☕": 1, "⭐": 1}


def test_extract_splits_sequences_into_code_points():
    # family ZWJ sequence -> three people, joiners ignored
    assert extract_emojis("👨\u200d👩\u200d👧") == {"👨": 1, "👩": 1, "👧": 1}
    # skin tone modifier counted as its own glyph
    assert extract_emojis("👍🏽") == {"👍": 1, "🏽": 1}
    # variation selector is not part of the match
    assert extract_emojis("❤\ufe0f") == {"❤": 1}


def test_stats_empty():
    stats = generate_stats({})
    assert stats == EmojiStats(total_emojis=0, unique_emojis=0, most_used=None, emoji_counts=[])


def test_stats_ranking_and_percentages():
    stats = generate_stats({"😢": 1, "😊": 4})
    assert stats.total_emojis == 5
    assert stats.unique_emojis == 2
    assert [(e.emoji, e.count, e.percentage) for e in stats.emoji_counts] == [
        ("😊", 4, 80),
        ("😢", 1, 20),
    ]
    assert stats.most_used.emoji == "😊"


def test_stats_rounds_half_up():
    stats = generate_stats({"🎉": 1, "😊": 7})
    percentages = {e.emoji: e.percentage for e in stats.emoji_counts}
    assert percentages == {"🎉": 13, "😊": 88}
    assert abs(sum(percentages.values()) - 100) <= len(percentages)


def test_stats_ties_break_by_code_point():
    stats = generate_stats({"😢": 2, "😊": 2})
    assert [e.emoji for e in stats.emoji_counts] == ["😊", "😢"]


def test_stats_totals_match_counts():
    counts = extract_emojis("🍎🍎🍊🚗 ✨✨✨")
    stats = generate_stats(counts)
    assert stats.total_emojis == sum(counts.values()) == 7
    assert stats.unique_emojis == len(counts)
    assert sum(e.count for e in stats.emoji_counts) == stats.total_emojis


def test_sentiment_empty_is_neutral_zero():
    result = analyze_sentiment({})
    assert (result.sentiment, result.score, result.confidence) == ("neutral", 0, 0)


def test_sentiment_positive():
    result = analyze_sentiment({"😊": 4, "😢": 1})
    assert result.sentiment == "positive"
    assert result.score == pytest.approx(0.8)
    assert result.confidence == pytest.approx(0.95)


def test_sentiment_negative():
    result = analyze_sentiment({"😢": 3, "🎉": 1})
    assert result.sentiment == "negative"
    assert result.score == pytest.approx(-0.75)
    assert result.confidence == pytest.approx(0.95)


def test_sentiment_equal_ratios_fall_to_neutral():
    result = analyze_sentiment({"😊": 1, "😢": 1})
    assert result.sentiment == "neutral"
    assert result.score == 0
    assert result.confidence == pytest.approx(0.1)


def test_sentiment_unlisted_emojis_dilute_toward_neutral():
    result = analyze_sentiment({"🎉": 3, "😊": 1})
    assert result.sentiment == "neutral"
    assert result.confidence == pytest.approx(0.75)


def test_sentiment_matches_lexicon_glyphs_with_variation_selector():
    result = analyze_sentiment(extract_emojis("❤\ufe0f❤\ufe0f"))
    assert result.sentiment == "positive"
    assert result.score == pytest.approx(1.0)


def test_insights_without_emojis():
    insights = generate_insights(generate_stats({}))
    assert len(insights) == 1
    assert "No emojis" in insights[0]


def test_insights_full_sequence():
    favorite = EmojiCountEntry(emoji="😀", count=15, percentage=60)
    stats = EmojiStats(total_emojis=25, unique_emojis=20, most_used=favorite, emoji_counts=[favorite])

    insights = generate_insights(stats)

    assert insights == [
        "Wow! You used 25 emojis. Your text is super expressive! 🎉",
        "You used 20 different emojis. Great variety in your emoji usage!",
        "😀 is clearly your favorite emoji, making up 60% of all emojis used!",
        'You prefer "Smileys & People" emojis the most!',
    ]


def test_insights_single_uncategorized_emoji():
    insights = generate_insights(generate_stats({"🎉": 1}))
    assert insights == [
        "You used 1 emoji. Adding more emojis can make your text more engaging!",
        "You only used one type of emoji (🎉). Try mixing different emojis for more variety!",
        "🎉 is clearly your favorite emoji, making up 100% of all emojis used!",
    ]


def test_insights_most_used_and_category_tie():
    insights = generate_insights(generate_stats({"😊": 2, "🐶": 2, "🍎": 1}))
    assert insights == [
        "You used 5 emojis. Your text is quite expressive!",
        "You used 3 different emojis. Great variety in your emoji usage!",
        "🐶 is your most used emoji at 40% of total usage.",
        'You prefer "Smileys & People" emojis the most!',
    ]


def test_insights_repetition():
    insights = generate_insights(generate_stats({"😂": 9, "😭": 1}))
    assert insights[0] == "You used 10 emojis. Your text is quite expressive!"
    assert insights[1] == "You used 2 different emojis. You tend to repeat your favorite emojis!"
    assert "clearly your favorite" in insights[2]


def test_insights_small_balance():
    insights = generate_insights(generate_stats({"👍": 1, "🚗": 1, "🍎": 1}))
    assert insights == [
        "You used 3 emojis. That's a nice balance for keeping text expressive but readable.",
        "You used 3 different emojis. Great variety in your emoji usage!",
        "🍎 is your most used emoji at 33% of total usage.",
        'You prefer "Hand Gestures" emojis the most!',
    ]


def test_insights_no_favorite_line_at_low_share():
    insights = generate_insights(generate_stats({"😀": 1, "😃": 1, "😄": 1, "😁": 1}))
    assert len(insights) == 3
    assert insights[-1] == 'You prefer "Smileys & People" emojis the most!'


def test_clean_text_collapses_spaces_and_keeps_newlines():
    assert clean_text("  hello \t\t world  \n  next  ") == "hello world \n next"
    assert clean_text("") == ""


def test_popular_emojis_and_categories():
    popular = get_popular_emojis()
    assert len(popular) == 160
    assert popular[0] == "😀"

    categories = get_emoji_categories()
    assert list(categories) == [
        "Smileys & People",
        "Hearts & Love",
        "Hand Gestures",
        "Animals & Nature",
        "Food & Drink",
        "Activities & Sports",
        "Travel & Places",
        "Objects & Symbols",
    ]
    categories["Smileys & People"].clear()
    assert get_emoji_categories()["Smileys & People"][0] == "😀"
