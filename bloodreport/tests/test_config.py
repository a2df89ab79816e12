from bloodreport import config


def test_env_int_falls_back_on_garbage(monkeypatch):
    monkeypatch.setenv("SOME_INT", "not-a-number")
    assert config._env_int("SOME_INT", 7) == 7
    monkeypatch.setenv("SOME_INT", "12")
    assert config._env_int("SOME_INT", 7) == 12


def test_env_bool(monkeypatch):
    monkeypatch.delenv("SOME_FLAG", raising=False)
    assert config._env_bool("SOME_FLAG", True) is True
    for raw, expected in (("yes", True), ("ON", True), ("0", False), ("off", False)):
        monkeypatch.setenv("SOME_FLAG", raw)
        assert config._env_bool("SOME_FLAG", True) is expected


def test_env_list(monkeypatch):
    monkeypatch.setenv("SOME_LIST", "a, b,,c ")
    assert config._env_list("SOME_LIST", []) == ["a", "b", "c"]


def test_defaults_match_scoring_rules():
    assert config.SCORING_POLICY.baseline == 85
    assert config.SCORING_POLICY.elevated_penalty == config.SCORING_POLICY.low_penalty == 3
    assert config.METRIC_SEED_MODE in ("per_metric", "legacy")
