import pytest

from worldforge.errors import RateLimited
from worldforge.models import World
from worldforge.services.rate_limit_service import RateLimitRule, RateLimitService
from worldforge.services.saga import Saga, SagaStep
from worldforge.services.storage_service import (
    build_map_path, build_world_file_path, map_image_filename, sanitize_filename,
)
from worldforge.services.upload_validation import format_file_size, validate_upload
from worldforge.services.world_service import WorldService


# Saga

def test_saga_runs_steps_in_order():
    order = []
    saga = Saga("demo", [
        SagaStep("a", lambda ctx: order.append("a") or 1),
        SagaStep("b", lambda ctx: order.append("b") or ctx["a"] + 1),
    ])

    result = saga.run()

    assert order == ["a", "b"]
    assert result.context == {"a": 1, "b": 2}
    assert result.status == "complete"


def test_saga_fatal_failure_compensates_in_reverse():
    undone = []

    def explode(ctx):
        raise RuntimeError("boom")

    saga = Saga("demo", [
        SagaStep("a", lambda ctx: "A", compensate=lambda ctx: undone.append("a")),
        SagaStep("b", lambda ctx: "B", compensate=lambda ctx: undone.append("b")),
        SagaStep("c", explode),
    ])

    with pytest.raises(RuntimeError):
        saga.run()
    assert undone == ["b", "a"]


def test_saga_non_fatal_failure_continues():
    errors = []

    def explode(ctx):
        raise RuntimeError("soft")

    saga = Saga(
        "demo",
        [SagaStep("a", explode, fatal=False), SagaStep("b", lambda ctx: "B")],
        on_step_error=lambda step, e: errors.append(step.name),
    )

    result = saga.run()

    assert result.status == "degraded"
    assert result.failed == ["a"]
    assert result.completed == ["b"]
    assert result.errors == {"a": "soft"}
    assert errors == ["a"]


def test_world_row_is_removed_when_owner_membership_fails(db, monkeypatch):
    from worldforge.services import world_service

    class Broken:
        def __init__(self, **kwargs):
            raise RuntimeError("membership table locked")

    monkeypatch.setattr(world_service, "WorldMember", Broken)

    with pytest.raises(RuntimeError):
        WorldService(db).create_world(owner_id="u1", name="Doomed")
    assert db.query(World).count() == 0


# Storage paths

def test_sanitize_filename():
    assert sanitize_filename("My Map (final).png") == "My-Map-final-.png"
    assert sanitize_filename("../../etc/passwd") == "etc-passwd"


def test_build_world_file_path():
    path = build_world_file_path("w1", "Town Map.png", kind="Maps", prefix="drafts")

    assert path.startswith("world/w1/maps/drafts/")
    assert path.endswith("-Town-Map.png")


def test_map_paths():
    assert build_map_path("w1", "m1", "base.png") == "maps/worlds/w1/m1/base.png"
    assert map_image_filename("image/png") == "base.png"
    assert map_image_filename("image/svg+xml") == "base.svg"


# Upload screening

def test_valid_image_passes():
    result = validate_upload("coast.png", "image/png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 32)

    assert result.is_valid
    assert result.detected_type == "image"


@pytest.mark.parametrize(
    "filename, content_type, content, fragment",
    [
        ("run.exe", "image/png", b"\x89PNG" + b"\x00" * 32, "extension '.exe'"),
        ("data.bin", "application/octet-stream", b"\x00" * 32, "not allowed"),
        ("tiny.png", "image/png", b"\x89PNG", "too small"),
        ("doc.pdf", "application/pdf", b"hello world", "PDF signature"),
        ("script.png", "image/png", b"#!/bin/sh\nrm -rf /\n", "Shell script"),
    ],
)
def test_invalid_uploads(filename, content_type, content, fragment):
    result = validate_upload(filename, content_type, content)

    assert not result.is_valid
    assert any(fragment in error for error in result.errors)


def test_oversized_image_is_rejected():
    result = validate_upload("huge.png", "image/png", b"\x89PNG" + b"\x00" * (10 * 1024 * 1024))

    assert not result.is_valid
    assert "exceeds limit" in result.errors[0]


def test_sanitized_name_produces_warning():
    result = validate_upload("..secret<1>.png", "image/png", b"\x89PNG" + b"\x00" * 32)

    assert result.sanitized_name == "secret1.png"
    assert result.warnings


def test_format_file_size():
    assert format_file_size(512) == "512 B"
    assert format_file_size(2048) == "2.00 KB"
    assert format_file_size(5 * 1024 * 1024) == "5.00 MB"


# Rate limits

class FixedClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def test_rate_limit_window(db):
    clock = FixedClock(1_000_000)
    limiter = RateLimitService(db, clock=clock)
    rule = RateLimitRule(2, 60)

    first = limiter.hit("test", "u1", rule)
    second = limiter.hit("test", "u1", rule)
    third = limiter.hit("test", "u1", rule)

    assert (first.allowed, first.remaining) == (True, 1)
    assert (second.allowed, second.remaining) == (True, 0)
    assert third.allowed is False
    assert third.reset_at == 1_000_000 - (1_000_000 % 60) + 60

    assert limiter.hit("test", "u2", rule).allowed

    clock.now += 60
    assert limiter.hit("test", "u1", rule).allowed


def test_rate_limit_enforce_raises(db):
    limiter = RateLimitService(db, clock=FixedClock(120))
    rule = RateLimitRule(1, 60, "Slow down")
    limiter.enforce("test", "u1", rule)

    with pytest.raises(RateLimited) as excinfo:
        limiter.enforce("test", "u1", rule)

    assert excinfo.value.message == "Slow down"
    assert excinfo.value.headers["X-RateLimit-Reset"] == "180"
