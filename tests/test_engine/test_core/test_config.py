import pytest
from pathlib import Path

from engine.core.config import DEFAULT_DATA_PATH, EngineConfig


def test_defaults():
    config = EngineConfig()
    assert config.mastery_threshold == 10
    assert config.default_max_level == 100
    assert config.data_path == DEFAULT_DATA_PATH

def test_bundled_data_path_exists():
    assert (DEFAULT_DATA_PATH / "schemas" / "interaction.schema.json").exists()
    assert (DEFAULT_DATA_PATH / "database" / "interactions").is_dir()

@pytest.mark.parametrize("kwargs", [
    {"mastery_threshold": 0},
    {"default_max_level": 0},
])
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        EngineConfig(**kwargs)

def test_from_env():
    config = EngineConfig.from_env({
        "SKILLGROWTH_MASTERY_THRESHOLD": "3",
        "SKILLGROWTH_DEFAULT_MAX_LEVEL": "50",
        "SKILLGROWTH_DATA_PATH": "/tmp/data",
    })
    assert config.mastery_threshold == 3
    assert config.default_max_level == 50
    assert config.data_path == Path("/tmp/data")

def test_from_env_ignores_unset():
    config = EngineConfig.from_env({"UNRELATED": "1"})
    assert config.mastery_threshold == 10

def test_repr():
    assert "mastery_threshold=10" in repr(EngineConfig())
