"""Insight Contract Gatekeeper.

Every candidate card must carry four elements before it may be shown:

1. Claim      - the title is a behavioural claim, not a raw metric
2. Evidence   - at least two evidence references, or 2-4 evidence items
3. Contrast   - an explicit statement of what did not happen
4. Confidence - a statement tied to a concrete scope (time, sample, repetition)

Prescriptive language anywhere in the card rejects it outright: the engine
mirrors observed activity and never steers.

Rejection is silent. Callers treat a failed card as "no card", never as an
error, and ``validate_insight_detailed`` only adds reasons for debugging.

Cards built by the engine carry a structured ``InsightContract`` which is
checked field by field. Cards that only have free ``explanation`` text are
parsed with line-scoped regular expressions; both paths apply the same
rules.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from mirrorline.insights.types import InsightCard, InsightContract, RejectedCard

logger = logging.getLogger(__name__)


METRIC_TITLE_PATTERNS = [
    re.compile(r"^you wrote \d+", re.IGNORECASE),
    re.compile(r"^you had \d+", re.IGNORECASE),
    re.compile(r"^\d+ entries?", re.IGNORECASE),
    re.compile(r"^\d+ reflections?", re.IGNORECASE),
    re.compile(r"^writing activity (up|down|steady)", re.IGNORECASE),
    re.compile(r"^you wrote on \d+ of", re.IGNORECASE),
]

PRESCRIPTIVE_PATTERNS = [
    re.compile(r"\btry\b", re.IGNORECASE),
    re.compile(r"\bshould\b", re.IGNORECASE),
    re.compile(r"\bmust\b", re.IGNORECASE),
    re.compile(r"\bneed to\b", re.IGNORECASE),
    re.compile(r"\bkeep it up\b", re.IGNORECASE),
    re.compile(r"\bbuild a habit\b", re.IGNORECASE),
]

CONFIDENCE_SCOPE_PATTERNS = [
    re.compile(
        r"\d+\s*(days?|weeks?|months?|years?|entries?|reflections?|active\s+days?)",
        re.IGNORECASE,
    ),
    re.compile(r"pattern.*(repeat|observed|across)", re.IGNORECASE),
    re.compile(r"sample\s+size|window", re.IGNORECASE),
]

MIN_EVIDENCE_ITEMS = 2
MAX_EVIDENCE_ITEMS = 4

_EVIDENCE_HEADING = re.compile(r"^\s*evidence\s*:", re.IGNORECASE)
_SECTION_END = re.compile(r"^\s*(contrast|confidence)\s*:", re.IGNORECASE)
_EVIDENCE_ITEM = re.compile(r"^\s*(?:[•\-*]|\d+[.)])\s+\S")
_CONTRAST_LINE = re.compile(r"^\s*contrast\s*:[ \t]*(\S.*)$", re.IGNORECASE | re.MULTILINE)
_CONFIDENCE_LINE = re.compile(r"^\s*confidence\s*:[ \t]*(\S.*)$", re.IGNORECASE | re.MULTILINE)

REASON_METRIC_TITLE = "Title is a metric, not a behavioral claim"
REASON_MISSING_CLAIM = "Missing claim: title is empty"
REASON_MISSING_CONTRAST = "Missing contrast: no explicit statement of what did not happen"
REASON_MISSING_CONFIDENCE = "Missing confidence signal"
REASON_UNSCOPED_CONFIDENCE = (
    "Confidence exists but does not reference scope "
    "(time windows, sample size, pattern repetition)"
)
REASON_PRESCRIPTIVE = 'Contains prescriptive language (violates "mirror, not steer" posture)'
REASON_MISSING_CARD = "Card is missing"


@dataclass
class ValidationResult:
    """Outcome of the contract gate for one card.

    Attributes:
        ok: Whether the card may be shown
        reasons: Human-readable rejection reasons, empty when ok
    """

    ok: bool
    reasons: List[str] = field(default_factory=list)


# =============================================================================
# Individual checks
# =============================================================================


def is_metric_title(title: str) -> bool:
    stripped = title.strip()
    return any(pattern.search(stripped) for pattern in METRIC_TITLE_PATTERNS)


def has_prescriptive_language(*texts: str) -> bool:
    return any(
        pattern.search(text)
        for text in texts
        if text
        for pattern in PRESCRIPTIVE_PATTERNS
    )


def has_scope_signal(confidence: str) -> bool:
    return any(pattern.search(confidence) for pattern in CONFIDENCE_SCOPE_PATTERNS)


def count_evidence_items(explanation: str) -> int:
    """Count bulleted or numbered lines in the ``Evidence:`` section.

    The section runs from the ``Evidence:`` heading to the next
    ``Contrast:``/``Confidence:`` heading or the end of the text.
    """
    count = 0
    in_section = False
    for line in explanation.splitlines():
        if not in_section:
            in_section = bool(_EVIDENCE_HEADING.match(line))
            continue
        if _SECTION_END.match(line):
            break
        if _EVIDENCE_ITEM.match(line):
            count += 1
    return count


def extract_contrast(explanation: str) -> Optional[str]:
    match = _CONTRAST_LINE.search(explanation)
    return match.group(1).strip() if match else None


def extract_confidence(explanation: str) -> Optional[str]:
    match = _CONFIDENCE_LINE.search(explanation)
    return match.group(1).strip() if match else None


# =============================================================================
# Gate
# =============================================================================


def _check_sections(
    reference_count: int,
    evidence_items: int,
    contrast: Optional[str],
    confidence: Optional[str],
) -> List[str]:
    reasons: List[str] = []

    itemized = MIN_EVIDENCE_ITEMS <= evidence_items <= MAX_EVIDENCE_ITEMS
    if reference_count < MIN_EVIDENCE_ITEMS and not itemized:
        reasons.append(
            f"Insufficient evidence: array has {reference_count} items, "
            f"explanation has {evidence_items} items "
            f"(need {MIN_EVIDENCE_ITEMS}-{MAX_EVIDENCE_ITEMS})"
        )

    if not contrast:
        reasons.append(REASON_MISSING_CONTRAST)

    if not confidence:
        reasons.append(REASON_MISSING_CONFIDENCE)
    elif not has_scope_signal(confidence):
        reasons.append(REASON_UNSCOPED_CONFIDENCE)

    return reasons


def _contract_texts(contract: InsightContract) -> Tuple[str, ...]:
    return (contract.claim, *contract.evidence, contract.contrast, contract.confidence)


def validate_insight_detailed(card: Optional[InsightCard]) -> ValidationResult:
    """Run every contract check and collect the reasons a card fails.

    Args:
        card: Candidate card (``None`` is rejected)

    Returns:
        ValidationResult; pass/fail matches ``validate_insight``
    """
    if card is None:
        return ValidationResult(ok=False, reasons=[REASON_MISSING_CARD])

    reasons: List[str] = []

    if not card.title.strip():
        reasons.append(REASON_MISSING_CLAIM)
    elif is_metric_title(card.title):
        reasons.append(REASON_METRIC_TITLE)

    contract = card.contract
    if contract is not None:
        reasons.extend(
            _check_sections(
                len(card.evidence),
                len([item for item in contract.evidence if item.strip()]),
                contract.contrast.strip() or None,
                contract.confidence.strip() or None,
            )
        )
        texts = (card.title, card.explanation, *_contract_texts(contract))
    else:
        explanation = card.explanation or ""
        reasons.extend(
            _check_sections(
                len(card.evidence),
                count_evidence_items(explanation),
                extract_contrast(explanation),
                extract_confidence(explanation),
            )
        )
        texts = (card.title, explanation)

    if has_prescriptive_language(*texts):
        reasons.append(REASON_PRESCRIPTIVE)

    return ValidationResult(ok=not reasons, reasons=reasons)


def validate_insight(card: Optional[InsightCard]) -> bool:
    """True if the card satisfies the insight contract."""
    return validate_insight_detailed(card).ok


def filter_valid_insights(cards: Iterable[InsightCard]) -> List[InsightCard]:
    """Drop non-compliant cards silently, preserving order."""
    return [card for card in cards if validate_insight(card)]


def gate_cards(
    cards: Sequence[InsightCard],
) -> Tuple[List[InsightCard], List[RejectedCard]]:
    """Split cards into accepted ones and debug records of rejections."""
    accepted: List[InsightCard] = []
    rejected: List[RejectedCard] = []
    for card in cards:
        result = validate_insight_detailed(card)
        if result.ok:
            accepted.append(card)
            continue
        rejected.append(
            RejectedCard(card_id=card.id, kind=card.kind.value, reasons=result.reasons)
        )
        logger.debug(f"Contract gate dropped {card.id}: {'; '.join(result.reasons)}")
    return accepted, rejected
