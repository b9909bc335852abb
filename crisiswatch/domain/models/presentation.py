"""Display helpers for verification results."""

from typing import Dict, Union

from .verification import Verdict, VerificationResult

VERDICT_LABELS: Dict[Verdict, str] = {
    Verdict.TRUE: "NO CAP ✅",
    Verdict.FALSE: "THAT'S CAP 🧢",
    Verdict.MOSTLY_FALSE: "MOSTLY CAP 🧢",
    Verdict.PARTIALLY_TRUE: "KINDA TRUE 🤷",
    Verdict.MOSTLY_TRUE: "LOWKEY TRUE ✅",
    Verdict.MIXED: "IT'S COMPLICATED 🤷",
    Verdict.UNVERIFIED: "CAN'T TELL 🤔",
    Verdict.UNVERIFIABLE: "CAN'T TELL 🤔",
}


def verdict_label(verdict: Union[Verdict, str]) -> str:
    """Slang label for a verdict, e.g. ``THAT'S CAP 🧢`` for FALSE."""
    return VERDICT_LABELS.get(Verdict.parse(verdict), str(verdict))


def share_text(result: VerificationResult) -> str:
    """Plain text summary suitable for pasting into a message."""
    if result.verdict is Verdict.TRUE:
        emoji, headline = "✅", "✅ NO CAP, IT'S REAL"
    elif result.verdict is Verdict.FALSE:
        emoji, headline = "🧢", "🧢 THAT'S CAP"
    else:
        emoji, headline = "🤔", f"📊 {result.verdict.label}"

    return (
        f"{emoji} Cap Check Result:\n"
        f"\n"
        f"🔍 Claim: \"{result.claim}\"\n"
        f"\n"
        f"{headline}\n"
        f"💯 Confidence: {result.confidence}%\n"
        f"📚 {result.sources_checked} sources checked\n"
        f"\n"
        f"{result.explanation or ''}\n"
        f"\n"
        f"Checked with Fact or Cap 🧢"
    )
