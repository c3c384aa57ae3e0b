"""Repository slug utilities.

Repository slugs are platform identifiers in ``org/repo`` format. They appear
in configuration (``repos`` and ``excluded_repos``) and in log lines, and are
not filesystem paths even though they use ``/`` as a separator.
"""

from __future__ import annotations


def repo_slug(org: str, repo: str) -> str:
    """Build a repository slug from organisation and repository name.

    Examples
    --------
    >>> repo_slug("openeuler", "community")
    'openeuler/community'

    """
    return f"{org}/{repo}"


def pull_request_ref(org: str, repo: str, number: int) -> str:
    """Return the ``org/repo#number`` reference used in log lines.

    Examples
    --------
    >>> pull_request_ref("openeuler", "community", 42)
    'openeuler/community#42'

    """
    return f"{repo_slug(org, repo)}#{number}"


def parse_repo_slug(slug: str) -> tuple[str, str]:
    """Parse a repository slug into organisation and repository name.

    Parameters
    ----------
    slug:
        Repository slug in ``org/repo`` format.

    Returns
    -------
    tuple[str, str]
        ``(org, repo)``.

    Raises
    ------
    ValueError
        If the slug is not in ``org/repo`` format.

    Examples
    --------
    >>> parse_repo_slug("openeuler/community")
    ('openeuler', 'community')

    """
    if slug.count("/") != 1:
        msg = f"Invalid repository slug: expected 'org/repo', got {slug!r}"
        raise ValueError(msg)

    org, repo = slug.split("/")
    if not org or not repo:
        msg = f"Invalid repository slug: expected 'org/repo', got {slug!r}"
        raise ValueError(msg)

    return org, repo
