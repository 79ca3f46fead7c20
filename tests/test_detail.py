import pytest

from notevoice.detail import DEFAULT_BANDS, DetailLevelPolicy, resolve_detail_level
from notevoice.models import DetailLevel


@pytest.mark.parametrize("level,expected", [
    ("brief", "30-60"),
    ("moderate", "60-120"),
    ("detailed", "120-200"),
    ("comprehensive", "200+"),
])
def test_target_ranges(level, expected):
    block = DetailLevelPolicy().instructions(level)
    assert block.level == level
    assert block.target_range == expected
    assert block.directives


@pytest.mark.parametrize("value,expected", [
    (DetailLevel.DETAILED, DetailLevel.DETAILED),
    ("Moderate", DetailLevel.MODERATE),
    (" COMPREHENSIVE ", DetailLevel.COMPREHENSIVE),
    ("verbose", DetailLevel.BRIEF),
    (None, DetailLevel.BRIEF),
    (3, DetailLevel.BRIEF),
])
def test_resolve_detail_level(value, expected):
    assert resolve_detail_level(value) == expected


def test_unknown_level_matches_brief():
    policy = DetailLevelPolicy()
    assert policy.instructions("novel-length") == policy.instructions("brief")


def test_missing_band_rejected():
    bands = {k: v for k, v in DEFAULT_BANDS.items() if k != DetailLevel.COMPREHENSIVE}
    with pytest.raises(ValueError):
        DetailLevelPolicy(bands)


def test_rendered_block(engine):
    text = engine.composer.prompt_maker.render(DetailLevelPolicy().instructions("moderate"))
    assert text.startswith("DETAIL LEVEL: MODERATE (Balanced Detail)")
    assert "- Target length: 60-120 words total" in text
