# type: ignore
from invoke import task

SOURCES = "src/huereport"


@task
def venv(ctx):
    """Create .venv with the package and its test and dev extras."""
    ctx.run("uv venv")
    ctx.run('uv pip install -e ".[test,dev]"')


@task
def lint(ctx):
    """ruff and mypy over the package sources."""
    ctx.run(f"ruff check {SOURCES} tests", pty=True)
    ctx.run(f"ruff format --check {SOURCES}", pty=True)
    ctx.run(f"mypy {SOURCES}", pty=True)


@task
def test(ctx, verbose=False):
    """Run the test suite with a coverage report."""
    flags = "-v " if verbose else ""
    ctx.run(
        f"pytest {flags}--cov=huereport --cov-report=term-missing",
        pty=True,
    )


@task(pre=[lint, test])
def ci(ctx):
    """Everything CI runs."""


@task
def build_package(ctx):
    """Build sdist and wheel into dist/."""
    ctx.run("rm -rf dist")
    ctx.run("uv build")


@task
def report(ctx, bridge=None):
    """Run a report against the configured bridges, DEBUG logging on."""
    selection = f" --bridge {bridge!r}" if bridge else ""
    ctx.run(f"LOGLEVEL=DEBUG huereport report{selection}", pty=True)
