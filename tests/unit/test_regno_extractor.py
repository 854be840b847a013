from pathlib import Path

from verimed.domain.validators import RegNoExtractor
from verimed.infra.regex.regno_config import load_regno_extractor

REPO_CFG = Path(__file__).resolve().parents[2] / "config" / "regno.yaml"


def test_default_patterns_first_match_wins():
    ex = RegNoExtractor()
    out = ex.extract("NAFDAC Reg. No.: 04-1234 batch AB12C345")
    assert out.number == "04-1234"
    assert out.pattern_id == "pat_0"

    out = ex.extract("Product AB12C345 info")
    assert out.number == "AB12C345"
    assert out.pattern_id == "pat_2"


def test_structural_pattern_is_case_sensitive():
    assert RegNoExtractor().extract("product ab12c345").number is None


def test_load_from_yaml(tmp_path):
    cfg = tmp_path / "regno.yaml"
    cfg.write_text("patterns:\n  - '(?i)code\\s*([0-9]{2}-[0-9]{4})'\n", encoding="utf-8")
    ex = load_regno_extractor(str(cfg))
    assert ex.extract("Code 04-1234").number == "04-1234"
    assert ex.extract("NAFDAC Reg. No.: 04-1234").number is None


def test_missing_or_invalid_yaml_falls_back(tmp_path):
    ex = load_regno_extractor(str(tmp_path / "missing.yaml"))
    assert ex.extract("Reg. No: AB12C345").number == "AB12C345"

    bad = tmp_path / "bad.yaml"
    bad.write_text("patterns: [unclosed\n", encoding="utf-8")
    assert load_regno_extractor(str(bad)).extract("Reg No 04-1234").number == "04-1234"

    bad_regex = tmp_path / "bad_regex.yaml"
    bad_regex.write_text("patterns:\n  - '([A-Z'\n", encoding="utf-8")
    assert load_regno_extractor(str(bad_regex)).extract("Reg No 04-1234").number == "04-1234"


def test_repo_config_matches_defaults():
    ex = load_regno_extractor(str(REPO_CFG))
    assert [p.pattern for p in ex.patterns] == RegNoExtractor.DEFAULT_PATTERNS


def test_regno_cfg_env_reaches_normalizer_and_classifier(tmp_path, monkeypatch):
    from verimed.domain.normalize import extract_registration_number
    from verimed.infra.regex.regno_config import default_regno_extractor
    from verimed.services.classifier import classify

    cfg = tmp_path / "regno.yaml"
    cfg.write_text("patterns:\n  - '(?i)code\\s*([0-9]{2}-[0-9]{4})'\n", encoding="utf-8")
    monkeypatch.setenv("REGNO_CFG", str(cfg))
    default_regno_extractor.cache_clear()
    try:
        assert extract_registration_number("Code 04-1234") == "04-1234"
        assert extract_registration_number("NAFDAC Reg. No.: 04-1234") is None
        assert classify("code 04-5678").registration_number == "04-5678"
    finally:
        default_regno_extractor.cache_clear()
