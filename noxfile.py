import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]


def _install(session: nox.Session) -> None:
    """Install the project with its test extra into the nox virtualenv."""
    session.run(
        "poetry",
        "install",
        "--all-extras",
        external=True,
    )


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest")


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no network, no app)."""
    _install(session)
    session.run(
        "pytest",
        "tests/shared/domain/",
        "tests/identity/domain/",
        "tests/catalogue/domain/",
        "tests/ordering/domain/",
        "tests/payments/domain/",
        "tests/storefront/domain/",
    )


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_bdd(session: nox.Session) -> None:
    """Run the Gherkin acceptance scenarios."""
    _install(session)
    session.run("pytest", "-m", "bdd")
