from importlib import metadata as importlib_metadata

DISTRIBUTION_NAME = "accounts-service"


def get_project_name() -> str:
    return DISTRIBUTION_NAME


def get_project_version(default: str = "unknown") -> str:
    """
    Version of the installed distribution, `default` when running from a
    source tree that was never installed.
    """
    try:
        return importlib_metadata.version(DISTRIBUTION_NAME)
    except importlib_metadata.PackageNotFoundError:
        return default


__all__ = ["DISTRIBUTION_NAME", "get_project_name", "get_project_version"]
