"""
Tests for Frame overlap arithmetic and cache keys.
"""

from src.sliding_window.frames.frame import Frame


class TestFrameOverlap:
    """Tests for Frame.start and Frame.frame_overlap."""

    def test_textbook_example(self):
        """Test the example from the Cloudflare sliding window write-up."""
        frame = Frame(135, 60)

        assert frame.time == 135
        assert frame.start == 120
        assert frame.frame_overlap() == {60: 45, 120: 15}
        assert sum(frame.frame_overlap().values()) == 60

    def test_happy_path(self):
        """Test a frame in the middle of a large window."""
        # 104729 is a prime number, so it is not divisible by 7200
        frame = Frame(104729, 7200)

        assert frame.time == 104729
        assert frame.start == 100800
        assert frame.frame_overlap() == {
            93600: 3271,  # 7200 - 3929
            100800: 3929,  # 104729 - 100800
        }

    def test_frame_at_the_boundary(self):
        """A frame on the boundary takes all of the previous bucket."""
        frame = Frame(100800, 7200)

        assert frame.start == 100800
        assert frame.frame_overlap() == {100800 - 7200: 7200, 100800: 0}

    def test_frame_after_the_boundary(self):
        """Test one second into a bucket."""
        frame = Frame(100801, 7200)

        assert frame.start == 100800
        assert frame.frame_overlap() == {93600: 7199, 100800: 1}

    def test_frame_below_the_boundary(self):
        """Test the boundary is computed with second precision."""
        frame = Frame(100799, 7200)

        assert frame.start == 93600
        assert frame.frame_overlap() == {86400: 1, 93600: 7199}

    def test_overlap_always_sums_to_window(self):
        """Test every frame covers exactly one window, whatever its phase."""
        for window_size in (1, 7, 60, 3600):
            for time in range(104729, 104729 + 2 * window_size + 1):
                frame = Frame(time, window_size)
                assert sum(frame.frame_overlap().values()) == window_size
                assert frame.start <= frame.time

    def test_buckets_shared_by_at_most_two_frames(self):
        """Each bucket is used by at most two frames and never beyond the window."""
        window_size = 11
        seconds_used = {}
        frames_seen = {}

        for time in range(104729, 104729 + 301, window_size):
            overlap = Frame(time, window_size).frame_overlap()
            assert sum(overlap.values()) == window_size
            assert min(overlap) != max(overlap)

            for bucket_start, seconds in overlap.items():
                seconds_used[bucket_start] = seconds_used.get(bucket_start, 0) + seconds
                frames_seen[bucket_start] = frames_seen.get(bucket_start, 0) + 1

                assert frames_seen[bucket_start] <= 2
                assert seconds_used[bucket_start] <= window_size


class TestFrameCacheKey:
    """Tests for Frame.cache_key."""

    def test_cache_key_format(self):
        """Test key layout: bucket key, observation period, window size, bucket index."""
        frame = Frame(104729, 7200)

        assert frame.cache_key("test", 1234567) == "test:1234567:7200:14"

    def test_same_bucket_same_key(self):
        """Test frames in the same bucket share their key."""
        first = Frame(120, 60)
        last = Frame(179, 60)

        assert first.cache_key("10.0.0.1", 600) == last.cache_key("10.0.0.1", 600)
        assert first.cache_key("10.0.0.1", 600) != Frame(180, 60).cache_key("10.0.0.1", 600)

    def test_key_depends_on_configuration(self):
        """Test the observation period and window size are part of the key."""
        frame = Frame(120, 60)

        assert frame.cache_key("k", 600) != frame.cache_key("k", 1200)
        assert frame.cache_key("k", 600) != Frame(120, 30).cache_key("k", 600)


class TestFrameValue:
    """Tests for Frame value getter and setter."""

    def test_unset_value(self):
        """Test an unfetched frame reads as zero but is flagged as null."""
        frame = Frame(100800, 7200)

        assert frame.has_null_value()
        assert frame.value == 0.0

    def test_set_value(self):
        """Test setting a value returns the frame."""
        frame = Frame(100800, 7200)

        assert frame.set_value(123.1) is frame
        assert frame.value == 123.1
        assert not frame.has_null_value()

    def test_zero_is_not_null(self):
        """Test a fetched zero is distinct from no data."""
        frame = Frame(100800, 7200).set_value(0)

        assert not frame.has_null_value()
        assert frame.value == 0.0

    def test_set_none(self):
        """Test setting None marks the frame as null again."""
        frame = Frame(100800, 7200).set_value(5)
        frame.set_value(None)

        assert frame.has_null_value()
