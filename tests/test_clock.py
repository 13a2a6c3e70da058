from datetime import timezone

from friendline.services.clock import utcnow


def test_utcnow_is_timezone_aware():
    assert utcnow().tzinfo == timezone.utc


def test_utcnow_is_strictly_increasing():
    stamps = [utcnow() for _ in range(500)]
    assert all(later > earlier for earlier, later in zip(stamps, stamps[1:]))
