"""Test that the project setup is working correctly."""

import trade_intel


def test_version() -> None:
    """Test that version is defined."""
    assert trade_intel.__version__ == "0.1.0"


def test_import_modules() -> None:
    """Test that all submodules can be imported."""
    from trade_intel import cli, config, ingestor, pipeline, report, trade, whale

    assert ingestor is not None
    assert trade is not None
    assert whale is not None
    assert report is not None
    assert config is not None
    assert pipeline is not None
    assert cli is not None
