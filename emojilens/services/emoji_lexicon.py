"""
Static emoji tables: suggestion list, category groups and polarity sets.

Glyphs are stored the way they are displayed (some carry U+FE0F). Matching
against extracted glyphs goes through ``bare()``, since extraction yields
single code points only.
"""
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Tuple

VARIATION_SELECTOR = "\ufe0f"


def bare(glyph: str) -> str:
    """Strip emoji presentation selectors so a glyph compares as its base code point."""
    return glyph.replace(VARIATION_SELECTOR, "")


def _bare_set(glyphs: Iterable[str]) -> FrozenSet[str]:
    return frozenset(bare(g) for g in glyphs)


POPULAR_EMOJIS: Tuple[str, ...] = (
    "😀", "😃", "😄", "😁", "😆", "😅", "😂", "🤣", "😊", "😇",
    "🙂", "🙃", "😉", "😌", "😍", "🥰", "😘", "😗", "😙", "😚",
    "😋", "😛", "😝", "😜", "🤪", "🤨", "🧐", "🤓", "😎", "🤩",
    "🥳", "😏", "😒", "😞", "😔", "😟", "😕", "🙁", "☹️", "😣",
    "😖", "😫", "😩", "🥺", "😢", "😭", "😤", "😠", "😡", "🤬",
    "🤯", "😳", "🥵", "🥶", "😱", "😨", "😰", "😥", "😓", "🤗",
    "🤔", "🤭", "🤫", "🤥", "😶", "😐", "😑", "😬", "🙄", "😯",
    "😦", "😧", "😮", "😲", "🥱", "😴", "🤤", "😪", "😵", "🤐",
    "🥴", "🤢", "🤮", "🤧", "😷", "🤒", "🤕", "🤑", "🤠", "😈",
    "👍", "👎", "👌", "✌️", "🤞", "🤟", "🤘", "🤙", "👈", "👉",
    "👆", "🖕", "👇", "☝️", "👋", "🤚", "🖐️", "✋", "🖖", "👏",
    "🙌", "🤲", "🤝", "🙏", "✍️", "💪", "🦾", "🦿", "🦵", "🦶",
    "👂", "🦻", "👃", "🧠", "🫀", "🫁", "🦷", "🦴", "👀", "👁️",
    "❤️", "🧡", "💛", "💚", "💙", "💜", "🖤", "🤍", "🤎", "💔",
    "❣️", "💕", "💞", "💓", "💗", "💖", "💘", "💝", "💟", "☮️",
    "✝️", "☪️", "🕉️", "☸️", "✡️", "🔯", "🕎", "☯️", "☦️", "🛐",
)

# Insertion order is the tie-break order for the preferred-category insight.
EMOJI_CATEGORIES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Smileys & People": (
        "😀", "😃", "😄", "😁", "😆", "😅", "😂", "🤣", "😊", "😇",
        "🙂", "🙃", "😉", "😌", "😍", "🥰", "😘", "😗", "😙", "😚",
    ),
    "Hearts & Love": (
        "❤️", "🧡", "💛", "💚", "💙", "💜", "🖤", "🤍", "🤎", "💔",
        "❣️", "💕", "💞", "💓", "💗", "💖", "💘", "💝", "💟",
    ),
    "Hand Gestures": (
        "👍", "👎", "👌", "✌️", "🤞", "🤟", "🤘", "🤙", "👈", "👉",
        "👆", "👇", "☝️", "👋", "🤚", "🖐️", "✋", "🖖", "👏", "🙌",
    ),
    "Animals & Nature": (
        "🐶", "🐱", "🐭", "🐹", "🐰", "🦊", "🐻", "🐼", "🐨", "🐯",
        "🦁", "🐮", "🐷", "🐽", "🐸", "🐵", "🙈", "🙉", "🙊", "🐒",
    ),
    "Food & Drink": (
        "🍎", "🍊", "🍋", "🍌", "🍉", "🍇", "🍓", "🫐", "🍈", "🍒",
        "🍑", "🥭", "🍍", "🥥", "🥝", "🍅", "🍆", "🥑", "🥦", "🥬",
    ),
    "Activities & Sports": (
        "⚽", "🏀", "🏈", "⚾", "🥎", "🎾", "🏐", "🏉", "🥏", "🎱",
        "🪀", "🏓", "🏸", "🏒", "🏑", "🥍", "🏏", "🪃", "🥅", "⛳",
    ),
    "Travel & Places": (
        "🚗", "🚕", "🚙", "🚌", "🚎", "🏎️", "🚓", "🚑", "🚒", "🚐",
        "🛻", "🚚", "🚛", "🚜", "🏍️", "🛵", "🚲", "🛴", "🛹", "🛼",
    ),
    "Objects & Symbols": (
        "⌚", "📱", "📲", "💻", "⌨️", "🖥️", "🖨️", "🖱️", "🖲️", "🕹️",
        "🗜️", "💽", "💾", "💿", "📀", "📼", "📷", "📸", "📹", "🎥",
    ),
})

POSITIVE_EMOJIS: FrozenSet[str] = _bare_set((
    "😀", "😃", "😄", "😁", "😆", "😅", "😂", "🤣", "😊", "😇",
    "🙂", "😉", "😌", "😍", "🥰", "😘", "🤩", "🥳", "😎", "👍",
    "👌", "✌️", "🤞", "🤟", "🤘", "👏", "🙌", "🤝", "🙏", "❤️",
    "🧡", "💛", "💚", "💙", "💜", "💕", "💞", "💓", "💗", "💖",
    "💘", "💝",
))

NEGATIVE_EMOJIS: FrozenSet[str] = _bare_set((
    "😞", "😔", "😟", "😕", "🙁", "☹️", "😣", "😖", "😫", "😩",
    "🥺", "😢", "😭", "😤", "😠", "😡", "🤬", "🤯", "😱", "😨",
    "😰", "😥", "😓", "💔", "👎", "🖕",
))

CATEGORY_MEMBERS: Mapping[str, FrozenSet[str]] = MappingProxyType({
    name: _bare_set(glyphs) for name, glyphs in EMOJI_CATEGORIES.items()
})
