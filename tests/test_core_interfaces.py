"""
Tests for core interfaces, data types, errors and format helpers.
"""
import math
import pytest
from pathlib import Path

from thumbkit.core.interfaces import (
    DETERMINE_FORMAT,
    ORIGINAL_FORMAT,
    FitMode,
    ResamplingAlgorithm,
    SizeSpec,
    ThumbnailConfig,
    ThumbnailParameter,
)
from thumbkit.core.exceptions import (
    IllegalArgumentError,
    IllegalStateError,
    NoSuchElementError,
    OverwriteDisallowedError,
    UnsupportedFormatError,
    ValidationError,
)
from thumbkit.core.extensions import (
    canonical_format,
    extension_matches_format,
    format_from_path,
    get_extension,
    is_image,
    is_supported_output_format,
    preferred_extension,
    supported_output_formats,
)


class TestSizeSpec:
    """Tests for SizeSpec dataclass."""

    def test_box(self):
        spec = SizeSpec.box(200, 100)
        assert spec.width == 200
        assert spec.height == 100
        assert spec.fit is FitMode.FIT_WITHIN
        assert spec.is_scaled is False

    def test_box_with_one_bound(self):
        spec = SizeSpec.box(200, None)
        assert spec.height is None

    def test_exact(self):
        spec = SizeSpec.exact(50, 60)
        assert spec.fit is FitMode.EXACT

    def test_exact_requires_both_dimensions(self):
        with pytest.raises(IllegalArgumentError, match="Both width and height"):
            SizeSpec(width=50, fit=FitMode.EXACT)

    def test_scaled_single_factor(self):
        spec = SizeSpec.scaled(0.5)
        assert spec.scale_width == 0.5
        assert spec.scale_height == 0.5
        assert spec.is_scaled is True

    def test_scaled_two_factors(self):
        spec = SizeSpec.scaled(0.5, 2.0)
        assert (spec.scale_width, spec.scale_height) == (0.5, 2.0)

    def test_percentage(self):
        assert SizeSpec.percentage(25).scale_width == 0.25

    def test_rejects_nothing_set(self):
        with pytest.raises(IllegalArgumentError, match="width or height"):
            SizeSpec()

    def test_rejects_size_and_scale(self):
        with pytest.raises(IllegalArgumentError, match="both a size and a scaling"):
            SizeSpec(width=10, scale_width=0.5, scale_height=0.5)

    def test_rejects_non_positive_width(self):
        with pytest.raises(IllegalArgumentError, match="Width must be greater"):
            SizeSpec.box(0, 10)

    def test_rejects_non_positive_height(self):
        with pytest.raises(IllegalArgumentError, match="Height must be greater"):
            SizeSpec.box(10, -1)

    @pytest.mark.parametrize("factor,message", [
        (0.0, "equal to or less than 0"),
        (-1.0, "equal to or less than 0"),
        (math.nan, "not a number"),
        (math.inf, "infinity"),
    ])
    def test_rejects_bad_factor(self, factor, message):
        with pytest.raises(IllegalArgumentError, match=message):
            SizeSpec.scaled(factor)

    def test_is_frozen(self):
        spec = SizeSpec.box(10, 10)
        with pytest.raises(AttributeError):
            spec.width = 20


class TestThumbnailParameter:
    """Tests for ThumbnailParameter dataclass."""

    def test_defaults(self):
        param = ThumbnailParameter(size=SizeSpec.box(10, 10))
        assert param.output_format == DETERMINE_FORMAT
        assert param.output_quality is None
        assert param.algorithm is ResamplingAlgorithm.BILINEAR
        assert param.use_exif_orientation is True
        assert param.allow_overwrite is True

    @pytest.mark.parametrize("quality", [-0.1, 1.01])
    def test_rejects_quality_out_of_range(self, quality):
        with pytest.raises(IllegalArgumentError, match="range 0.0 and 1.0"):
            ThumbnailParameter(size=SizeSpec.box(10, 10), output_quality=quality)

    def test_format_specified(self):
        size = SizeSpec.box(10, 10)
        assert ThumbnailParameter(size, output_format="PNG").is_format_specified
        assert not ThumbnailParameter(size, output_format=ORIGINAL_FORMAT).is_format_specified
        assert not ThumbnailParameter(size).is_format_specified


class TestThumbnailConfig:
    """Tests for ThumbnailConfig.freeze()."""

    def test_freeze_without_size(self):
        with pytest.raises(IllegalStateError, match="size or scaling factor is not set"):
            ThumbnailConfig().freeze()

    def test_freeze_box(self):
        param = ThumbnailConfig(width=100, height=50).freeze()
        assert param.size == SizeSpec.box(100, 50)

    def test_freeze_exact(self):
        param = ThumbnailConfig(width=100, height=50, keep_aspect_ratio=False).freeze()
        assert param.size.fit is FitMode.EXACT

    def test_freeze_scaled(self):
        param = ThumbnailConfig(scale_width=0.5, scale_height=0.25).freeze()
        assert param.size.is_scaled
        assert param.size.scale_height == 0.25

    def test_freeze_is_a_snapshot(self):
        config = ThumbnailConfig(width=100, height=50)
        param = config.freeze()
        config.width = 10
        assert param.size.width == 100


class TestExceptions:
    """Tests for the error hierarchy."""

    def test_illegal_argument_is_value_error(self):
        assert issubclass(IllegalArgumentError, ValueError)
        assert issubclass(IllegalArgumentError, ValidationError)

    def test_illegal_state_is_runtime_error(self):
        assert issubclass(IllegalStateError, RuntimeError)

    def test_overwrite_disallowed(self):
        error = OverwriteDisallowedError(Path("a.jpg"))
        assert error.path == Path("a.jpg")
        assert str(error) == "The destination file exists."
        assert isinstance(error, IllegalArgumentError)

    def test_unsupported_format_message(self):
        error = UnsupportedFormatError("FOO")
        assert "FOO" in str(error)

    def test_no_such_element_ends_iteration(self):
        assert issubclass(NoSuchElementError, StopIteration)


class TestExtensions:
    """Tests for format and extension helpers."""

    def test_is_image(self):
        assert is_image("a.JPG")
        assert is_image(Path("b.webp"))
        assert not is_image("c.txt")

    @pytest.mark.parametrize("name,expected", [
        ("a.jpg", "jpg"),
        ("a.tar.gz", "gz"),
        ("noext", None),
        ("trailing.", None),
    ])
    def test_get_extension(self, name, expected):
        assert get_extension(name) == expected

    @pytest.mark.parametrize("name", ["jpg", "jpeg", "JPEG", ".jpg", "Jpg"])
    def test_canonical_jpeg(self, name):
        assert canonical_format(name) == "JPEG"

    def test_canonical_unknown(self):
        assert canonical_format("foo") is None
        assert canonical_format(None) is None

    def test_supported_output_formats(self):
        formats = supported_output_formats()
        assert "JPEG" in formats
        assert "PNG" in formats

    def test_is_supported_output_format(self):
        assert is_supported_output_format("png")
        assert not is_supported_output_format("foo")

    def test_preferred_extension(self):
        assert preferred_extension("jpeg") == ".jpg"
        assert preferred_extension("PNG") == ".png"
        assert preferred_extension("foo") is None

    def test_format_from_path(self):
        assert format_from_path("x/y.png") == "PNG"
        assert format_from_path("x/y.JPEG") == "JPEG"
        assert format_from_path("x/y") is None
        assert format_from_path("x/y.unknown") is None

    def test_extension_matches_format(self):
        assert extension_matches_format("a.jpeg", "JPEG")
        assert extension_matches_format("a.JPG", "jpg")
        assert not extension_matches_format("a.png", "JPEG")
        assert not extension_matches_format("a", "JPEG")
