from app.services.formatting import format_market_cap, short_mint, truncate_description


def test_format_market_cap():
    assert format_market_cap(None) == "N/A"
    assert format_market_cap(0) == "N/A"
    assert format_market_cap(12.5) == "$12.50"
    assert format_market_cap(4560) == "$4.56k"
    assert format_market_cap(1_230_000) == "$1.23M"


def test_short_mint():
    assert short_mint("7GCihgDB8fe6KNjn2MYtkzZcRjQy3t9GHdC8uHYmW2hr") == "7GCi...W2hr"


def test_truncate_description():
    assert truncate_description("short") == "short"
    assert truncate_description("exactly8") == "exactly8"
    assert truncate_description("a bit longer") == "a bit lo..."
