from __future__ import annotations

import requests
from github import Github


def get_client(token: str | None) -> Github:
    return Github(token)


def get_repo(repo_name: str, token: str | None = None, client: Github | None = None):
    return (client or get_client(token)).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_changed_files(pr) -> list:
    return list(pr.get_files())


def get_label_names(pr) -> set[str]:
    return {label.name for label in pr.get_labels()}


def get_reviews(pr) -> list:
    return list(pr.get_reviews())


def get_team_members(client: Github, org: str, team_slug: str) -> set[str]:
    """Return the current logins of an organization team. Never cached."""
    team = client.get_organization(org).get_team_by_slug(team_slug)
    return {member.login for member in team.get_members()}


def base_raw_url(owner: str, repo: str, branch: str, path: str) -> str:
    """Raw-content URL for ``path`` on ``branch`` of the base repository."""
    return f"https://github.com/{owner}/{repo}/raw/{branch}/{path}"


class ContentFetcher:
    """Fetch raw file content by URL with the bot's token.

    Each fetch is an independent request with no shared session, so one
    fetcher can serve every worker of the narrative thread pool.
    """

    def __init__(self, token: str | None = None):
        self._headers = {"Authorization": f"token {token}"} if token else {}

    def fetch(self, url: str) -> str:
        response = requests.get(url, headers=self._headers)
        response.raise_for_status()
        return response.text
