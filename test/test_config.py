from app.config import Settings, config_warnings


def _settings(**overrides):
    values = {"OPENAI_API_KEY": "sk-test", "RESEND_API_KEY": None, "APP_URL": ""}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_fully_configured_has_no_warnings():
    assert config_warnings(_settings(RESEND_API_KEY="re_test", APP_URL="https://palette.test")) == []


def test_missing_inference_key_warns():
    warnings = config_warnings(_settings(OPENAI_API_KEY=None))
    assert len(warnings) == 1
    assert "OPENAI_API_KEY" in warnings[0]


def test_email_without_app_url_warns():
    warnings = config_warnings(_settings(RESEND_API_KEY="re_test", APP_URL="  "))
    assert len(warnings) == 1
    assert "APP_URL" in warnings[0]


def test_app_url_ignored_when_email_disabled():
    assert config_warnings(_settings()) == []
