"""Tests for geohash encoding."""

import random

import pytest
from tz_reverse.config import BASE32
from tz_reverse.exceptions import InvalidCoordinateError
from tz_reverse.geohash import (
    validate_coords,
    encode,
    decode,
    decode_bbox,
)


class TestValidateCoords:
    """Tests for coordinate validation."""

    def test_within_bounds(self):
        """Test that valid coordinates pass."""
        validate_coords(45.0, -90.0)
        validate_coords(90.0, 180.0)
        validate_coords(-90.0, -180.0)

    def test_latitude_out_of_range(self):
        """Test that latitude beyond the poles is rejected, not clamped."""
        with pytest.raises(InvalidCoordinateError):
            validate_coords(90.0001, 0.0)
        with pytest.raises(InvalidCoordinateError):
            validate_coords(-100.0, 0.0)

    def test_longitude_out_of_range(self):
        """Test that longitude beyond the antimeridian is rejected."""
        with pytest.raises(InvalidCoordinateError):
            validate_coords(0.0, 180.5)
        with pytest.raises(InvalidCoordinateError):
            validate_coords(0.0, -200.0)

    def test_nan(self):
        """Test that NaN is rejected."""
        with pytest.raises(InvalidCoordinateError):
            validate_coords(float("nan"), 0.0)
        with pytest.raises(InvalidCoordinateError):
            validate_coords(0.0, float("nan"))

    def test_is_value_error(self):
        """Test that coordinate errors are ValueErrors for callers."""
        with pytest.raises(ValueError):
            validate_coords(91.0, 0.0)


class TestEncode:
    """Tests for geohash encoding."""

    def test_known_value(self):
        """Test the classic reference point from the geohash description."""
        assert encode(57.64911, 10.40744, 11) == "u4pruydqqvj"

    def test_new_york(self):
        """Test a well-known city."""
        assert encode(40.7128, -74.0060, 5) == "dr5re"

    def test_origin(self):
        """Test that (0, 0) lies in the upper half on both axes."""
        assert encode(0.0, 0.0, 5) == "s0000"

    def test_corners(self):
        """Test the extreme corners of the domain."""
        assert encode(-90.0, -180.0, 5) == "00000"
        assert encode(90.0, 180.0, 5) == "zzzzz"

    def test_length(self):
        """Test that output length equals the precision."""
        for precision in range(1, 12):
            assert len(encode(12.3, 45.6, precision)) == precision

    def test_alphabet(self):
        """Test that only base-32 symbols are produced."""
        code = encode(-33.8688, 151.2093, 12)
        assert all(c in BASE32 for c in code)

    def test_invalid_precision(self):
        """Test that precision < 1 raises error."""
        with pytest.raises(ValueError):
            encode(0.0, 0.0, 0)

    def test_out_of_range(self):
        """Test that out-of-range input is not encoded."""
        with pytest.raises(InvalidCoordinateError):
            encode(95.0, 0.0, 5)

    def test_binary_alphabet(self):
        """Test that a two-symbol alphabet spends one bisection per character."""
        assert encode(10.0, 10.0, 2, "01") == "11"
        assert encode(-10.0, -10.0, 2, "01") == "00"
        assert encode(-10.0, 10.0, 2, "01") == "10"

    def test_alphabet_size_must_be_power_of_two(self):
        """Test that an alphabet that cannot pack whole bits is rejected."""
        with pytest.raises(ValueError):
            encode(0.0, 0.0, 5, "012")


class TestEncodeProperties:
    """Property tests over random coordinates."""

    @pytest.fixture
    def points(self):
        rng = random.Random(42)
        return [
            (rng.uniform(-90.0, 90.0), rng.uniform(-180.0, 180.0))
            for _ in range(500)
        ]

    def test_deterministic(self, points):
        """Test that encoding the same point twice gives the same code."""
        for lat, lon in points:
            assert encode(lat, lon, 5) == encode(lat, lon, 5)

    def test_truncation(self, points):
        """Test that a shorter code is a prefix of a longer one."""
        for lat, lon in points:
            full = encode(lat, lon, 9)
            for precision in range(1, 9):
                assert encode(lat, lon, precision) == full[:precision]

    def test_point_inside_own_cell(self, points):
        """Test that a point lies inside the box of its own code."""
        for lat, lon in points:
            lat_min, lat_max, lon_min, lon_max = decode_bbox(encode(lat, lon, 5))
            assert lat_min <= lat <= lat_max
            assert lon_min <= lon <= lon_max

    def test_binary_bits_match_base32(self, points):
        """Test that five binary symbols carry the bits of one base-32 symbol."""
        for lat, lon in points:
            bits = encode(lat, lon, 10, "01")
            symbols = "".join(BASE32[int(bits[i:i + 5], 2)] for i in (0, 5))
            assert symbols == encode(lat, lon, 2)


class TestDecode:
    """Tests for geohash decoding."""

    def test_empty_is_world(self):
        """Test that an empty code decodes to the whole globe."""
        assert decode_bbox("") == (-90.0, 90.0, -180.0, 180.0)

    def test_first_symbol(self):
        """Test the box of a single symbol."""
        # "s" = 11000: east half, north half, then the western quarter
        assert decode_bbox("s") == (0.0, 45.0, 0.0, 45.0)

    def test_sentinel_stops_decoding(self):
        """Test that padded keys decode to the box of their prefix."""
        assert decode_bbox("dr5--") == decode_bbox("dr5")

    def test_center_round_trip(self):
        """Test that encoding a cell center gives back the cell."""
        for code in ("dr5re", "9q8yy", "u33d", "xn7"):
            lat, lon = decode(code)
            assert encode(lat, lon, len(code)) == code

    def test_invalid_character(self):
        """Test that letters outside the alphabet are rejected."""
        with pytest.raises(ValueError):
            decode_bbox("dra")  # 'a' is not a geohash symbol

    def test_binary_alphabet(self):
        """Test decoding a code written with a two-symbol alphabet."""
        assert decode_bbox("1", "01") == (-90.0, 90.0, 0.0, 180.0)
        assert decode_bbox("10", "01") == (-90.0, 0.0, 0.0, 180.0)
        with pytest.raises(ValueError):
            decode_bbox("2", "01")
