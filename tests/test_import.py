import importlib
import pathlib
import sys

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))


def test_importable() -> None:
    module = importlib.import_module("tle_parser")
    for name in ("parse", "validate", "parse_with_recovery", "calculate_checksum", "validate_checksum"):
        assert hasattr(module, name)
    assert set(module.__all__) <= set(dir(module))
