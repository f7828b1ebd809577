import pytest
from tablebook.domain.errors import CapacityExceededError, ValidationError
from tablebook.domain.services import (
    WindowSnapshot,
    classify,
    normalize_phone,
    parse_party_size,
    sanitize_text,
    validate_capacity,
    validate_name,
)
from tablebook.models import Availability, ServiceWindow


def _snapshot(occupied: int, capacity: int = 15) -> WindowSnapshot:
    return WindowSnapshot(
        window=ServiceWindow.MIDDAY,
        capacity=capacity,
        occupied=occupied,
        partial_threshold=7,
        full_threshold=10,
    )


def test_sanitize_strips_script_tags_and_handlers() -> None:
    raw = '  <script>alert(1)</script><b onclick="x">Maria</b> javascript:void(0)  '
    assert sanitize_text(raw) == 'Maria void(0)'


def test_sanitize_truncates_to_500_characters() -> None:
    assert len(sanitize_text("a" * 800)) == 500


def test_sanitize_drops_control_characters() -> None:
    assert sanitize_text("Ana\x00\x07 Ruiz") == "Ana Ruiz"


def test_normalize_phone_keeps_digits_only() -> None:
    assert normalize_phone("612 34-56.78") == "612345678"


@pytest.mark.parametrize("raw", ["61234567", "6123456789", "", "abcdefghi", "+34612345678"])
def test_normalize_phone_rejects_wrong_length(raw: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        normalize_phone(raw)
    assert excinfo.value.field == "phone"


def test_validate_name_requires_three_characters() -> None:
    with pytest.raises(ValidationError):
        validate_name("  Al ")
    assert validate_name(" Ali ") == "Ali"


def test_validate_name_markup_only_counts_as_empty() -> None:
    with pytest.raises(ValidationError):
        validate_name("<b></b>", min_length=1)


def test_parse_party_size_accepts_numbers_and_sentinel() -> None:
    assert parse_party_size(4) == (4, False)
    assert parse_party_size("8") == (8, False)
    assert parse_party_size("large") == (10, True)
    assert parse_party_size(4.0) == (4, False)


@pytest.mark.parametrize("raw", [0, -1, 9, "x", None, True, 4.9, "4.5"])
def test_parse_party_size_rejects_out_of_range(raw: object) -> None:
    with pytest.raises(ValidationError):
        parse_party_size(raw)


def test_classify_uses_absolute_thresholds() -> None:
    assert classify(0, 15, 7, 10) == Availability.AVAILABLE
    assert classify(6, 15, 7, 10) == Availability.AVAILABLE
    assert classify(7, 15, 7, 10) == Availability.PARTIAL
    assert classify(10, 15, 7, 10) == Availability.FULL
    assert classify(5, 5, 7, 10) == Availability.FULL


def test_rejects_when_party_exceeds_remaining() -> None:
    with pytest.raises(CapacityExceededError) as excinfo:
        validate_capacity(_snapshot(occupied=13), seats=4)
    assert excinfo.value.remaining == 2
    assert excinfo.value.requested == 4


def test_accepts_when_within_capacity() -> None:
    assert validate_capacity(_snapshot(occupied=11), seats=4) == 0


def test_overbooked_window_reports_negative_remaining() -> None:
    snap = _snapshot(occupied=18)
    assert snap.remaining == -3
    assert snap.status == Availability.FULL
