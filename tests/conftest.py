from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolate_home_config(tmp_path, monkeypatch):
    """Point the default configuration directory at an empty temp dir.

    Some tests expect no user-level config to exist, so a real
    ``~/.config/changelog-thing.config.json`` must never be picked up.
    """
    config_dir = tmp_path / "home_config"
    config_dir.mkdir()
    monkeypatch.setattr("changelog_thing.config.loader._get_config_directory", lambda: config_dir)
    yield config_dir


SAMPLE_LINES = [
    "Jane Doe::@:: (HEAD -> main, origin/main)::@::feat(api): add health check::@::2 days ago::@::abc1234def5678abc1234def5678abc1234def56",
    "John Roe::@::::@::fix: handle empty payload::@::3 days ago::@::1111111222222233333334444444555555566666",
    "Jane Doe::@::::@::update readme::@::4 days ago::@::7777777888888899999990000000aaaaaaabbbbb",
    "Bot::@::::@::build(deps): bump click::@::5 days ago::@::ccccccc1234567ccccccc1234567ccccccc12345",
    "John Roe::@::::@::feat: second feature::@::6 days ago::@::ddddddd1234567ddddddd1234567ddddddd12345",
]


@pytest.fixture
def sample_lines():
    return list(SAMPLE_LINES)


@pytest.fixture
def repo_dir(tmp_path) -> Path:
    path = tmp_path / "repo"
    path.mkdir()
    return path
