"""
Portfolio Backend: Configuration Tests
========================================

What we test:
    ✅ validate_required() names every missing value, per transport
    ✅ CORS origin list parsing
    ✅ log_level normalization
    ✅ build_mailer() picks the transport named by MAIL_TRANSPORT
"""

import pytest
from pydantic import ValidationError

from portfolio_api.config import Settings
from portfolio_api.exceptions import ConfigError
from portfolio_api.services.mailer import build_mailer
from portfolio_api.services.sendgrid_mailer import SendGridMailer
from portfolio_api.services.smtp_mailer import SMTPMailer


def bare_settings(**overrides) -> Settings:
    values = dict(
        _env_file=None,
        review_form_key="",
        jwt_secret="",
        smtp_host="",
        smtp_username="",
        smtp_password="",
        sendgrid_api_key="",
        mail_from_address="",
    )
    values.update(overrides)
    return Settings(**values)


class TestValidateRequired:

    def test_complete_settings_pass(self, settings):
        settings.validate_required()

    def test_missing_values_are_all_listed(self):
        with pytest.raises(ConfigError) as exc_info:
            bare_settings().validate_required()

        missing = exc_info.value.context["missing"]
        assert missing == [
            "REVIEW_FORM_KEY",
            "JWT_SECRET",
            "SMTP_HOST",
            "SMTP_USERNAME",
            "SMTP_PASSWORD",
        ]

    def test_sendgrid_needs_api_key_and_sender(self):
        settings = bare_settings(
            mail_transport="sendgrid",
            review_form_key="k",
            jwt_secret="j",
        )

        with pytest.raises(ConfigError) as exc_info:
            settings.validate_required()

        assert exc_info.value.context["missing"] == ["SENDGRID_API_KEY", "MAIL_FROM_ADDRESS"]

    def test_admin_email_is_not_required_at_startup(self, settings):
        settings.model_copy(update={"admin_email": ""}).validate_required()


class TestSettingsParsing:

    def test_cors_origins_split_and_trimmed(self):
        settings = bare_settings(cors_origins=" https://a.example.com , https://b.example.com,,")

        assert settings.cors_origins_list == ["https://a.example.com", "https://b.example.com"]

    def test_log_level_is_uppercased(self):
        assert bare_settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValidationError):
            bare_settings(log_level="chatty")

    def test_unknown_transport_rejected(self):
        with pytest.raises(ValidationError):
            bare_settings(mail_transport="pigeon")

    def test_sender_falls_back_to_smtp_username(self):
        settings = bare_settings(smtp_username="mailer@example.com")

        assert settings.sender_address == "mailer@example.com"
        assert bare_settings(
            smtp_username="mailer@example.com",
            mail_from_address="noreply@example.com",
        ).sender_address == "noreply@example.com"


class TestBuildMailer:

    def test_smtp_by_default(self, settings):
        mailer = build_mailer(settings)

        assert isinstance(mailer, SMTPMailer)
        assert mailer.host == "smtp.example.com"
        assert mailer.sender_address == "mailer@example.com"

    def test_sendgrid_when_selected(self, settings):
        mailer = build_mailer(
            settings.model_copy(
                update={
                    "mail_transport": "sendgrid",
                    "sendgrid_api_key": "SG.key",
                    "mail_from_address": "noreply@example.com",
                }
            )
        )

        assert isinstance(mailer, SendGridMailer)
        assert mailer.name == "sendgrid"
        assert mailer.sender_address == "noreply@example.com"
