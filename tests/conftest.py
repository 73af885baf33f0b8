"""Shared pytest fixtures and configuration."""

import pytest

from registrar.factory import RegistrarFactory


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


@pytest.fixture
def factory() -> RegistrarFactory:
    """Create a factory that tracks every student and course a test builds."""
    return RegistrarFactory()


@pytest.fixture(autouse=True)
def check_invariants_after_test(factory: RegistrarFactory):
    """Scan every constructed student and course once the test is done."""
    yield
    factory.assert_invariants()


@pytest.fixture
def sally(factory):
    return factory.make_student("Sally")


@pytest.fixture
def fred(factory):
    return factory.make_student("Fred")


@pytest.fixture
def zongo(factory):
    return factory.make_student("Zongo Jr.")


@pytest.fixture
def comp225(factory):
    """A course limited to 16 students."""
    return factory.make_course("COMP 225", "Software Fun Fun", enrollment_limit=16)


@pytest.fixture
def math6(factory):
    """A course with no enrollment limit."""
    return factory.make_course("Math 6", "All About the Number Six")


@pytest.fixture
def basket_weaving(factory):
    return factory.make_course("Underwater Basket Weaving 101", "Senior spring semester!")
