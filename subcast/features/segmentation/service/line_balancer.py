# File: subcast/features/segmentation/service/line_balancer.py
import re

LINE_BREAK_PUNCTUATION = ",;:.!?–-"
PUNCTUATION_BONUS = -10

# A line never gets shorter than this when breaking
MIN_LINE_CHARS = 10

_WHITESPACE = re.compile(r"\s+")


def format_subtitle_text(text: str, max_chars_per_line: int = 42) -> str:
    """
    Breaks text into two visually balanced lines when it exceeds one line.

    Candidates are spaces within +-25 chars (or a third of the length) of the
    middle; lower |len(line1) - len(line2)| wins, with a bonus for breaking
    right after punctuation. If no candidate keeps both lines within the limit
    the text is returned unchanged on one line.
    """
    trimmed = text.strip()
    length = len(trimmed)

    if length <= max_chars_per_line:
        return trimmed

    target = length // 2
    search_range = min(25, length // 3)

    best_split = -1
    best_score = float("inf")

    for i in range(max(MIN_LINE_CHARS, target - search_range), min(length - MIN_LINE_CHARS, target + search_range) + 1):
        if trimmed[i] != " ":
            continue

        line1_len = i
        line2_len = length - i - 1
        if line1_len > max_chars_per_line or line2_len > max_chars_per_line:
            continue

        score = abs(line1_len - line2_len)
        if trimmed[i - 1] in LINE_BREAK_PUNCTUATION:
            score += PUNCTUATION_BONUS

        if score < best_score:
            best_score = score
            best_split = i

    if best_split > 0:
        line1 = trimmed[:best_split].strip()
        line2 = trimmed[best_split + 1:].strip()
        return f"{line1}\n{line2}"

    return trimmed


def balance_lines(text: str, max_chars_per_line: int = 42) -> str:
    """
    Idempotent: existing breaks and repeated whitespace are collapsed before
    the break is recomputed, so balance_lines(balance_lines(x)) == balance_lines(x).
    """
    cleaned = _WHITESPACE.sub(" ", text.replace("\n", " ")).strip()
    return format_subtitle_text(cleaned, max_chars_per_line)
