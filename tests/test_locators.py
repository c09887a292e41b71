from pathlib import Path

import pytest

from signup_verifier.errors import ConfigurationError
from signup_verifier.locators import load_locators
from signup_verifier.models import LocatorStrategy


def test_bundled_table_covers_every_screen() -> None:
    table = load_locators()

    for name in ("form", "email_field", "password_field", "terms_checkbox", "signup_button"):
        assert table.get("signup", name).strategy is LocatorStrategy.CSS
    assert table.get("success", "verification_message").strategy is LocatorStrategy.XPATH
    assert table.get("common", "header").value == "header[data-testid='app-header']"
    assert table.text("success_message") == "Your account has been created successfully"


def test_unknown_entries_raise_configuration_error() -> None:
    table = load_locators()

    with pytest.raises(ConfigurationError):
        table.get("signup", "captcha")
    with pytest.raises(ConfigurationError):
        table.get("billing", "form")
    with pytest.raises(ConfigurationError):
        table.text("farewell")


def test_custom_locator_file(tmp_path: Path) -> None:
    path = tmp_path / "locators.yaml"
    path.write_text(
        "\n".join(
            [
                "pages:",
                "  signup:",
                "    form: {strategy: id, value: register}",
                "texts:",
                "  success_message: Done",
            ]
        )
    )

    table = load_locators(path)

    assert table.get("signup", "form").selector() == "id=register"
    assert table.text("success_message") == "Done"


def test_unreadable_or_invalid_files(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_locators(tmp_path / "missing.yaml")

    path = tmp_path / "broken.yaml"
    path.write_text("pages:\n  signup:\n    form: {strategy: telepathy, value: x}\n")
    with pytest.raises(ConfigurationError):
        load_locators(path)
