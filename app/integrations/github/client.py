"""
GitHub Object Store

Uses a GitHub repository as the summary archive:
- Key = file path in the repository (prefixed with ARCHIVE_PREFIX)
- Body = markdown file content
- Metadata = YAML frontmatter
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional, Tuple

import yaml
from github import Github
from github.Repository import Repository
from github.GithubException import GithubException, UnknownObjectException

from app.config import Settings

logger = logging.getLogger(__name__)


class GitHubObjectStore:
    """Blob put/get by key on top of the GitHub contents API."""

    def __init__(self, settings: Settings, client: Optional[Github] = None):
        self.settings = settings
        self.client = client or Github(settings.github_token)
        self.default_branch = settings.github_default_branch
        self.key_prefix = settings.archive_prefix
        self._repo: Optional[Repository] = None

    @property
    def repo(self) -> Repository:
        """Lazy repository lookup so construction makes no API calls."""
        if self._repo is None:
            self._repo = self.client.get_repo(
                f"{self.settings.github_repo_owner}/{self.settings.github_repo_name}"
            )
            logger.info(f"GitHub object store initialized for {self._repo.full_name}")
        return self._repo

    def full_key(self, key: str) -> str:
        return self.key_prefix + key

    def locator_url(self, key: str) -> str:
        """Browsable URL of a stored key."""
        owner = self.settings.github_repo_owner
        name = self.settings.github_repo_name
        return f"https://github.com/{owner}/{name}/blob/{self.default_branch}/{self.full_key(key)}"

    async def put(
        self,
        key: str,
        body: str,
        content_type: str = "text/markdown",
        metadata: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Create or update the object stored under `key`.

        Args:
            key: Object key (repository path without prefix)
            body: Document body
            content_type: Stored alongside the metadata
            metadata: Flat string-to-string tags

        Returns:
            Locator (html URL) of the stored file
        """
        path = self.full_key(key)
        tags = dict(metadata or {})
        tags["contentType"] = content_type
        tags["uploadedAt"] = datetime.now(timezone.utc).isoformat()
        content = self._with_frontmatter(tags, body)

        try:
            result = await asyncio.to_thread(self._create_or_update, path, content)
        except GithubException as e:
            logger.error(f"Failed to store {path}: {e}")
            raise

        stored = result.get("content")
        locator = getattr(stored, "html_url", None) or self.locator_url(key)
        logger.info(f"Stored {path} -> {locator}")
        return locator

    async def get(self, key: str) -> str:
        """Return the body stored under `key`, without frontmatter."""
        path = self.full_key(key)
        file_content = await asyncio.to_thread(
            self.repo.get_contents, path, ref=self.default_branch
        )
        _, body = self._extract_frontmatter(file_content.decoded_content.decode("utf-8"))
        return body

    async def list_documents(self, prefix: str) -> List[Dict[str, Any]]:
        """
        Recursively list markdown documents under `prefix`.

        Returns:
            [{path, locator, metadata, content}, ...]; empty if the path is missing
        """
        try:
            contents = await asyncio.to_thread(
                self.repo.get_contents, prefix, ref=self.default_branch
            )
        except UnknownObjectException:
            logger.info(f"No documents under {prefix}")
            return []
        return await asyncio.to_thread(self._scan_directory, contents)

    def _create_or_update(self, path: str, content: str) -> Dict[str, Any]:
        message = f"Archive thread summary {path}"
        try:
            existing = self.repo.get_contents(path, ref=self.default_branch)
        except UnknownObjectException:
            return self.repo.create_file(
                path=path, message=message, content=content, branch=self.default_branch
            )
        return self.repo.update_file(
            path=path,
            message=message,
            content=content,
            sha=existing.sha,
            branch=self.default_branch,
        )

    def _scan_directory(self, contents) -> List[Dict[str, Any]]:
        if not isinstance(contents, list):
            contents = [contents]

        documents = []
        for item in contents:
            if item.type == "dir":
                sub = self.repo.get_contents(item.path, ref=self.default_branch)
                documents.extend(self._scan_directory(sub))
            elif item.type == "file" and item.name.endswith(".md"):
                try:
                    raw = item.decoded_content.decode("utf-8")
                except Exception as e:
                    logger.warning(f"Failed to read {item.path}: {e}")
                    continue
                metadata, body = self._extract_frontmatter(raw)
                documents.append(
                    {
                        "path": item.path,
                        "locator": item.html_url,
                        "metadata": metadata or {},
                        "content": body,
                    }
                )
        return documents

    @staticmethod
    def _with_frontmatter(metadata: Dict[str, str], body: str) -> str:
        frontmatter = yaml.safe_dump(metadata, allow_unicode=True, sort_keys=False)
        return f"---\n{frontmatter}---\n\n{body}"

    @staticmethod
    def _extract_frontmatter(content: str) -> Tuple[Optional[Dict[str, Any]], str]:
        """Split YAML frontmatter from markdown content."""
        if not content.startswith("---"):
            return None, content

        parts = content.split("---", 2)
        if len(parts) < 3:
            return None, content

        try:
            frontmatter = yaml.safe_load(parts[1].strip()) or {}
        except yaml.YAMLError as e:
            logger.warning(f"Failed to parse YAML frontmatter: {e}")
            return None, content

        return frontmatter, parts[2].lstrip("\n")
