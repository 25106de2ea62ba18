import nox

nox.needs_version = ">=2024.4.15"
nox.options.default_venv_backend = "uv|virtualenv"


@nox.session(python=["3.8", "3.9", "3.10", "3.11", "3.12"])
def tests(session: nox.Session) -> None:
    session.install("-e.[test]")
    session.run("pytest", "--timeout=30", "tests", *session.posargs)


@nox.session
@nox.parametrize("editable", [True, False])
def install(session: nox.Session, editable: bool) -> None:
    session.install("-e." if editable else ".")
    # The package must not pull in any of its test dependencies.
    session.run("python", "-c", "import python_mimeparams; python_mimeparams.parse_parameters('a=1')")
    res = session.run("python", "-c", "import sys, python_mimeparams; print('yaml' in sys.modules)", silent=True)
    assert res.strip() == "False"
