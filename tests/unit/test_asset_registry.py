import pytest

from core.utils.exceptions import AssetNotFoundError, InvalidAmountError
from services.asset_registry import AssetCSVLoader


def test_default_universe_listed_in_file_order(registry):
    assert registry.symbols() == ["AAPL", "GOOGL", "MSFT", "TSLA", "AMZN", "JPM", "JNJ", "V"]

    aapl = registry.get("AAPL")
    assert aapl.name == "Apple Inc."
    assert aapl.sector == "Technology"
    assert aapl.price == 150.0
    assert 0 <= aapl.volume <= 1_000_000


def test_get_unknown_symbol_raises(registry):
    with pytest.raises(AssetNotFoundError) as exc_info:
        registry.get("NOPE")
    assert exc_info.value.symbol == "NOPE"


def test_get_returns_snapshot(registry):
    quote = registry.get("AAPL")
    quote.price = 1.0
    assert registry.get("AAPL").price == 150.0


def test_apply_price_change_records_change_fields(registry):
    updated = registry.apply_price_change("MSFT", 330.0)

    assert updated.price == 330.0
    assert updated.last_change == pytest.approx(30.0)
    assert updated.last_change_percent == pytest.approx(10.0)


def test_apply_price_change_clamps_to_floor(registry):
    updated = registry.apply_price_change("V", -50.0)

    assert updated.price == 0.01
    assert updated.last_change == pytest.approx(0.01 - 220.0)


def test_volume_increment(registry):
    before = registry.get("JPM").volume
    registry.apply_price_change("JPM", 141.0, volume_increment=500)
    assert registry.get("JPM").volume == before + 500

    with pytest.raises(InvalidAmountError):
        registry.apply_price_change("JPM", 141.0, volume_increment=-1)


def test_price_history_tracks_changes(registry):
    registry.apply_price_change("JNJ", 161.0)
    registry.apply_price_change("JNJ", 162.0)

    assert registry.price_history("JNJ") == [160.0, 161.0, 162.0]


def test_price_history_is_bounded(empty_registry):
    empty_registry.list_asset("TEST", "Test Corp", "Technology", 10.0, volume=0)
    for i in range(250):
        empty_registry.apply_price_change("TEST", 10.0 + i)

    history = empty_registry.price_history("TEST")
    assert len(history) == empty_registry.settings.price_history_length
    assert history[-1] == 259.0


def test_delist(registry):
    registry.delist("TSLA")
    assert "TSLA" not in registry.symbols()
    with pytest.raises(AssetNotFoundError):
        registry.delist("TSLA")


def test_list_asset_rejects_non_positive_price(empty_registry):
    with pytest.raises(InvalidAmountError):
        empty_registry.list_asset("BAD", "Bad Inc.", "Technology", 0)


def test_csv_loader_skips_invalid_rows(tmp_path):
    csv_file = tmp_path / "assets.csv"
    csv_file.write_text(
        "# comment\n"
        "symbol,name,sector,price\n"
        "abc,Alpha Beta,Technology,12.5\n"
        "BAD,Missing Price,Technology,\n"
        "NEG,Negative,Financial,-3\n"
        "TXT,Text Price,Financial,abc\n"
    )

    rows = AssetCSVLoader(str(csv_file)).load_assets()
    assert rows == [{"symbol": "ABC", "name": "Alpha Beta", "sector": "Technology", "price": 12.5}]


def test_csv_loader_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        AssetCSVLoader(str(tmp_path / "missing.csv"))
