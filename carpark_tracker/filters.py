"""Noise filtering for normalized events."""
from __future__ import annotations

from . import config
from .models import ParkingEvent


def is_noise_note(note: str) -> bool:
    """True when the note is keyboard-app boilerplate rather than user text."""
    lowered = note.lower()
    return any(marker in lowered for marker in config.NOISE_NOTE_MARKERS)


def is_test_note(note: str) -> bool:
    lowered = note.lower()
    if any(marker in lowered for marker in config.TEST_NOTE_MARKERS):
        return True
    return any(marker in note for marker in config.TEST_NOTE_MARKERS_EXACT)


def keep_event(event: ParkingEvent) -> bool:
    """Return whether ``event`` belongs in the event collection."""
    if not event.location:
        return False
    if not event.recorded_at:
        return False
    if is_noise_note(event.note):
        return False
    if is_test_note(event.note):
        return False
    return True


__all__ = ["is_noise_note", "is_test_note", "keep_event"]
