"""Tests for encoder options."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from embedpack import config
from embedpack.config import (
    DEFAULT_MIN_GZIP_SPACE_SAVINGS,
    EncoderOptions,
    get_encoder_options,
    get_global_options,
    set_global_options,
)


def test_defaults():
    options = EncoderOptions()
    assert options.tags == ()
    assert options.gzip is False
    assert options.min_gzip_space_savings == DEFAULT_MIN_GZIP_SPACE_SAVINGS == 5.0


@pytest.mark.parametrize(
    "tags, expected",
    [
        ("", ()),
        ("prod", ("prod",)),
        ("prod,linux", ("prod", "linux")),
        (["prod", "", "linux"], ("prod", "linux")),
        ([""], ()),
        (" prod, linux ", (" prod", " linux ")),
        ([" ", "prod"], (" ", "prod")),
    ],
)
def test_tags(tags, expected):
    assert get_encoder_options(tags=tags).tags == expected


def test_negative_threshold_is_rejected():
    with pytest.raises(ValidationError):
        EncoderOptions(min_gzip_space_savings=-1)


def test_options_are_frozen():
    options = EncoderOptions()
    with pytest.raises(ValidationError):
        options.gzip = True


def test_get_encoder_options_keeps_default_threshold():
    assert get_encoder_options(gzip=True).min_gzip_space_savings == 5.0
    assert get_encoder_options(min_gzip_space_savings=12.5).min_gzip_space_savings == 12.5


def test_global_options(monkeypatch):
    monkeypatch.setattr(config, "_global_options", None)
    assert get_global_options() == EncoderOptions()

    custom = EncoderOptions(gzip=True)
    set_global_options(custom)
    assert get_global_options() is custom
