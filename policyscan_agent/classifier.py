from __future__ import annotations

from .models import Classification, FortiGuardFragment, TalosFragment

# Order and membership of these lists are part of the policy.
BLOCKED_SIGNALS = (
    "adult", "porn", "sex", "nsfw", "gore", "violence",
    "malware", "phishing", "botnet", "spam", "hacking",
)

REVIEW_SIGNALS = (
    "games", "game", "social", "social networking", "chat",
    "streaming", "video", "entertainment", "proxy", "vpn",
)

GOOD_SIGNALS = (
    "education", "educational", "reference", "academic",
    "business", "productivity", "search engines",
)

BLOCKED = Classification(
    status="blocked",
    label="Blocked",
    reason="Talos/FortiGuard category indicates adult, gore, malware, or similar high-risk content.",
)
REVIEW = Classification(
    status="review",
    label="Needs review",
    reason="Talos/FortiGuard category indicates games, social, streaming, or proxy-like content.",
)
GOOD = Classification(
    status="good",
    label="Good",
    reason="Talos/FortiGuard category indicates educational, reference, or productivity content.",
)
UNKNOWN = Classification(
    status="unknown",
    label="Unsure",
    reason="No strong policy signals from Talos/FortiGuard categories.",
)
NEGATIVE_SCORE = Classification(
    status="blocked",
    label="Blocked",
    reason="Cisco Talos reputation score is negative (high risk).",
)


def _category_text(talos: TalosFragment | None, fortiguard: FortiGuardFragment | None) -> str:
    parts: list[str] = []
    if talos is not None and talos.category:
        parts.append(talos.category.lower())
    if fortiguard is not None and fortiguard.category:
        parts.append(fortiguard.category.lower())
    if fortiguard is not None and fortiguard.threat:
        parts.append(fortiguard.threat.lower())
    return " ".join(parts)


def _matches(text: str, signals: tuple[str, ...]) -> bool:
    return any(s in text for s in signals)


def classify(
    url: str,
    talos: TalosFragment | None,
    fortiguard: FortiGuardFragment | None,
) -> Classification:
    """Map the two engine fragments for `url` to a policy classification.

    First matching signal class wins (blocked > review > good), otherwise
    unknown. A negative Talos score forces blocked regardless of categories.
    """
    text = _category_text(talos, fortiguard)

    if _matches(text, BLOCKED_SIGNALS):
        verdict = BLOCKED
    elif _matches(text, REVIEW_SIGNALS):
        verdict = REVIEW
    elif _matches(text, GOOD_SIGNALS):
        verdict = GOOD
    else:
        verdict = UNKNOWN

    # Only the Talos score is consulted.
    if talos is not None and talos.score is not None and talos.score < 0:
        verdict = NEGATIVE_SCORE

    return verdict
