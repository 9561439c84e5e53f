"""Test basic package imports to validate structure."""


def test_main_package_imports():
    """Test that main package components can be imported."""
    from statusmon import __version__, get_settings, main

    assert __version__ == "0.1.0"
    assert callable(main)
    assert callable(get_settings)


def test_config_imports():
    """Test configuration module imports."""
    from statusmon.config import (
        AppSettings,
        ConfigError,
        ConfigLoader,
        get_settings,
    )

    assert AppSettings is not None
    assert callable(get_settings)
    assert ConfigLoader is not None
    assert issubclass(ConfigError, Exception)


def test_utils_imports():
    """Test utility module imports."""
    from statusmon.utils import (
        UtilityError,
        get_logger,
        run_with_timeout,
        setup_logging,
    )

    assert callable(setup_logging)
    assert callable(get_logger)
    assert callable(run_with_timeout)
    assert issubclass(UtilityError, Exception)


def test_error_hierarchies():
    """Each subsystem raises its own exception family."""
    from statusmon.checks import CheckError, SessionError, UnknownProjectTypeError
    from statusmon.notification import NotificationError
    from statusmon.registry import RegistryError
    from statusmon.storage import StorageError

    assert issubclass(UnknownProjectTypeError, CheckError)
    assert issubclass(SessionError, CheckError)
    for error in (NotificationError, RegistryError, StorageError):
        assert issubclass(error, Exception)
