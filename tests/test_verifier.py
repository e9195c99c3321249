"""
Unit tests for FullVerifier.
Verifies that prefix-hash collisions are split by full content hash.
"""
import time

import pytest

from dupcheck.core.exceptions import ScanIOError
from dupcheck.core.hasher import ContentHasher
from dupcheck.core.models import ErrorPolicy, FileRef, Stage
from dupcheck.core.verifier import FullVerifier


def make_file(tmp_path, name: str, content: bytes) -> FileRef:
    path = tmp_path / name
    path.write_bytes(content)
    return FileRef(path=str(path), size=len(content))


@pytest.fixture
def prefix_collision(tmp_path):
    """Three files sharing a 1KB prefix; only a and b are fully identical."""
    prefix = b"P" * 1024
    a = make_file(tmp_path, "a.bin", prefix + b"same tail")
    b = make_file(tmp_path, "b.bin", prefix + b"same tail")
    c = make_file(tmp_path, "c.bin", prefix + b"different")
    hasher = ContentHasher(prefix_limit=1024)
    prefix_hash = hasher.compute_prefix_hash(a)
    assert prefix_hash == hasher.compute_prefix_hash(c)
    return hasher, prefix_hash, (a, b, c)


class TestFullVerifier:

    def test_splits_prefix_collision(self, prefix_collision):
        hasher, prefix_hash, (a, b, c) = prefix_collision
        candidates = {prefix_hash: frozenset({a, b, c})}

        verified, skipped = FullVerifier(hasher).verify(candidates)

        assert skipped == []
        assert list(verified.values()) == [frozenset({a, b})]

    def test_groups_are_keyed_by_full_hash(self, prefix_collision):
        hasher, prefix_hash, (a, b, c) = prefix_collision
        verified, _ = FullVerifier(hasher).verify({prefix_hash: frozenset({a, b, c})})

        assert prefix_hash not in verified
        assert set(verified) == {hasher.compute_full_hash(a)}

    def test_group_collapsing_to_one_file_is_dropped(self, tmp_path):
        hasher = ContentHasher(prefix_limit=4)
        x = make_file(tmp_path, "x.bin", b"headXXXX")
        y = make_file(tmp_path, "y.bin", b"headYYYY")
        prefix_hash = hasher.compute_prefix_hash(x)

        verified, _ = FullVerifier(hasher).verify({prefix_hash: frozenset({x, y})})
        assert verified == {}

    def test_true_duplicates_survive(self, tmp_path):
        hasher = ContentHasher()
        files = [make_file(tmp_path, f"{i}.bin", b"identical" * 100) for i in range(3)]
        prefix_hash = hasher.compute_prefix_hash(files[0])

        verified, _ = FullVerifier(hasher, max_workers=3).verify({prefix_hash: frozenset(files)})
        assert list(verified.values()) == [frozenset(files)]

    def test_result_independent_of_worker_count(self, prefix_collision):
        hasher, prefix_hash, files = prefix_collision
        candidates = {prefix_hash: frozenset(files)}
        results = [FullVerifier(hasher, max_workers=n).verify(candidates)[0] for n in (1, 2, 4)]
        assert results[0] == results[1] == results[2]

    def test_candidates_are_not_mutated(self, prefix_collision):
        hasher, prefix_hash, files = prefix_collision
        candidates = {prefix_hash: frozenset(files)}
        FullVerifier(hasher).verify(candidates)
        assert candidates == {prefix_hash: frozenset(files)}

    def test_empty_candidates(self):
        assert FullVerifier(ContentHasher()).verify({}) == ({}, [])

    def test_vanished_file_is_skipped(self, prefix_collision, tmp_path):
        hasher, prefix_hash, (a, b, c) = prefix_collision
        (tmp_path / "b.bin").unlink()

        verified, skipped = FullVerifier(hasher).verify({prefix_hash: frozenset({a, b, c})})

        assert verified == {}
        assert [s.path for s in skipped] == [b.path]

    def test_vanished_file_aborts_under_abort_policy(self, prefix_collision, tmp_path):
        hasher, prefix_hash, (a, b, c) = prefix_collision
        (tmp_path / "b.bin").unlink()

        verifier = FullVerifier(hasher, error_policy=ErrorPolicy.ABORT)
        with pytest.raises(ScanIOError) as exc_info:
            verifier.verify({prefix_hash: frozenset({a, b, c})})
        assert exc_info.value.path == b.path

    def test_reports_progress(self, prefix_collision):
        hasher, prefix_hash, files = prefix_collision
        calls = []
        FullVerifier(hasher).verify(
            {prefix_hash: frozenset(files)},
            progress_callback=lambda stage, current, total: calls.append((stage, current, total))
        )
        assert calls == [(Stage.FULL.value, i, 3) for i in range(1, 4)]

    def test_stopped_returns_empty(self, prefix_collision):
        hasher, prefix_hash, files = prefix_collision
        verified, skipped = FullVerifier(hasher).verify({prefix_hash: frozenset(files)}, stopped_flag=lambda: True)
        assert verified == {}
        assert skipped == []

    def test_interrupt_cancels_pending_files(self, tmp_path):
        class SlowHasher(ContentHasher):
            def __init__(self):
                super().__init__()
                self.calls = 0

            def compute_full_hash(self, file):
                self.calls += 1
                time.sleep(0.3)
                return super().compute_full_hash(file)

        files = [make_file(tmp_path, f"{i}.bin", b"same") for i in range(6)]
        hasher = SlowHasher()

        def interrupt(stage, current, total):
            raise KeyboardInterrupt

        start = time.monotonic()
        with pytest.raises(KeyboardInterrupt):
            FullVerifier(hasher).verify({b"\x00" * 16: frozenset(files)}, progress_callback=interrupt)
        elapsed = time.monotonic() - start

        assert hasher.calls <= 2
        assert elapsed < 1.2
