"""Tests for verification domain models."""

import pytest

from crisiswatch.domain.errors import ExhaustionError, InvalidClaimError
from crisiswatch.domain.models.claim import VerificationRequest
from crisiswatch.domain.models.example_claim import DEMO_EXAMPLES
from crisiswatch.domain.models.presentation import share_text, verdict_label
from crisiswatch.domain.models.verification import (
    EvidenceItem,
    Verdict,
    VerificationResult,
    clamp_confidence,
    parse_processing_time,
    scale_confidence,
)


@pytest.mark.parametrize(
    "fraction, expected",
    [
        (0.97, 97),
        (0.5, 50),
        (1, 100),
        (0, 0),
        (1.4, 100),
        (-0.2, 0),
        ("0.8", 80),
        (None, 0),
        ("abc", 0),
    ],
)
def test_scale_confidence(fraction, expected):
    """Fractions are scaled to a percentage exactly once and clamped."""
    assert scale_confidence(fraction) == expected


def test_clamp_confidence_rounds_half_up():
    assert clamp_confidence(72.5) == 73
    assert clamp_confidence(72.4) == 72
    assert clamp_confidence(250) == 100


def test_verdict_parse():
    """Test verdict normalization from upstream spellings."""
    assert Verdict.parse("false") is Verdict.FALSE
    assert Verdict.parse("mostly false") is Verdict.MOSTLY_FALSE
    assert Verdict.parse("Partially-True") is Verdict.PARTIALLY_TRUE
    assert Verdict.parse("nonsense") is Verdict.UNVERIFIED
    assert Verdict.parse(None) is Verdict.UNVERIFIED
    assert Verdict.MOSTLY_TRUE.label == "MOSTLY TRUE"


def test_parse_processing_time():
    assert parse_processing_time("12.4s") == 12.4
    assert parse_processing_time(12.43) == 12.4
    assert parse_processing_time("n/a") == 0.0
    assert parse_processing_time(None) == 0.0


def test_evidence_reliability_bands():
    """Test evidence reliability banding and clamping."""
    assert EvidenceItem(reliability=0.8).reliability_band == "High"
    assert EvidenceItem(reliability=0.6).reliability_band == "Medium"
    assert EvidenceItem(reliability=0.59).reliability_band == "Low"
    assert EvidenceItem().reliability_band is None
    assert EvidenceItem(reliability=1.7).reliability == 1.0


def test_result_from_backend(backend_result):
    """Test normalization of a raw backend result."""
    result = VerificationResult.from_backend(backend_result)

    assert result.claim == backend_result["claim_text"]
    assert result.verdict is Verdict.FALSE
    assert result.confidence == 97
    assert result.sources_checked == 14
    assert result.processing_time_seconds == 12.4
    assert result.time_display == "12.4s"
    assert result.explanation_alt == backend_result["explanation_hindi"]
    assert result.claim_id == "42"
    assert [item.source for item in result.evidence] == ["WHO", "Blog"]
    assert result.evidence[0].reliability_band == "High"


def test_result_from_check_data(check_data):
    """Test normalization of a gateway ``data`` object."""
    result = VerificationResult.from_check_data(check_data)

    assert result.verdict is Verdict.TRUE
    assert result.confidence == 91
    assert result.sources_checked == 9
    assert result.processing_time_seconds == 8.2
    assert result.cached is True


def test_check_data_shape(backend_result):
    """Converting to check data keeps display units."""
    data = VerificationResult.from_backend(backend_result).to_check_data()

    assert data["verdict"] == "FALSE"
    assert data["confidence"] == 97
    assert data["sources"] == 14
    assert data["time"] == "12.4s"
    assert data["explanation_hindi"] == backend_result["explanation_hindi"]
    assert VerificationResult.from_check_data(data).confidence == 97


def test_request_create_trims_claim():
    request = VerificationRequest.create("  Is the earth flat?  ", language="hi")

    assert request.claim == "Is the earth flat?"
    assert request.to_payload() == {"claim": "Is the earth flat?", "language": "hi", "skip_cache": False}
    assert "skip_cache" not in request.to_query_params()


def test_request_query_params_with_skip_cache():
    request = VerificationRequest.create("claim", skip_cache=True)
    assert request.to_query_params() == {"claim": "claim", "language": "en", "skip_cache": "true"}


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_request_rejects_empty_claim(text):
    with pytest.raises(InvalidClaimError):
        VerificationRequest.create(text)


def test_exhaustion_error_carries_last_error():
    error = ExhaustionError("An unexpected error occurred. Please try again.", last_error="boom")
    assert error.message == "An unexpected error occurred. Please try again."
    assert str(error).endswith("(boom)")


def test_example_canned_result():
    """Canned example results use the preset verdict and numbers."""
    example = DEMO_EXAMPLES[0]
    result = example.canned_result("cached")

    assert result.claim == example.claim
    assert result.verdict is Verdict.FALSE
    assert result.confidence == 98
    assert result.sources_checked == 14
    assert result.time_display == "12.4s"
    assert [e.id for e in DEMO_EXAMPLES] == [1, 2, 3]


def test_verdict_labels():
    assert verdict_label(Verdict.FALSE) == "THAT'S CAP 🧢"
    assert verdict_label("TRUE") == "NO CAP ✅"
    assert verdict_label("PARTIALLY_TRUE") == "KINDA TRUE 🤷"
    assert verdict_label("MOSTLY_FALSE") == "MOSTLY CAP 🧢"


def test_share_text(sample_result):
    text = share_text(sample_result)

    assert text.startswith("🧢 Cap Check Result:")
    assert '🔍 Claim: "The moon is made of cheese"' in text
    assert "🧢 THAT'S CAP" in text
    assert "💯 Confidence: 99%" in text
    assert "📚 11 sources checked" in text
    assert text.endswith("Checked with Fact or Cap 🧢")
