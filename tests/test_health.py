"""Basic health check tests."""

from typer.testing import CliRunner


def test_import_campus_match():
    """Test that campus_match package can be imported."""
    import campus_match
    assert campus_match.__version__ == "1.0.0"


def test_import_onboarding():
    """Test that the onboarding models can be imported."""
    from onboarding import OnboardingStep, ProfileDraft

    draft = ProfileDraft(name="Alex")
    assert draft.name == "Alex"
    assert OnboardingStep.BASICS.value == "basics"


def test_settings_loaded():
    """Test that settings pick up the test environment."""
    from campus_match.config import get_settings

    settings = get_settings()
    assert settings.is_development
    assert settings.supabase_url.startswith("https://")
    assert settings.default_member_role == "current_student"


def test_cli_version():
    from campus_match.main import app

    result = CliRunner().invoke(app, ["version"])
    assert result.exit_code == 0
    assert "1.0.0" in result.stdout


def test_cli_health():
    from campus_match.main import app

    result = CliRunner().invoke(app, ["health"])
    assert result.exit_code == 0
    assert "Configuration loaded" in result.stdout
