import pytest

from sortable_toolkit.core.services.outline_editing_service import OutlineEditingService


@pytest.fixture
def editing_service():
    return OutlineEditingService()


@pytest.fixture
def strict_service():
    return OutlineEditingService(strict=True)


@pytest.fixture
def write_user_config(isolated_config):
    """Write a user override file into the isolated config directory."""

    def _write(filename, text):
        (isolated_config / filename).write_text(text, encoding="utf-8")

    return _write
