"""Configuration management for CG.

This module provides a read-only view over the global and repository
configuration files, with environment variables taking precedence.
"""

import os
import configparser
from pathlib import Path
from typing import NamedTuple, Optional

from loguru import logger

DEFAULT_AUTHOR_NAME = 'CG'
DEFAULT_AUTHOR_EMAIL = 'cg@local'
DEFAULT_GIT_EXECUTABLE = 'git'


class Identity(NamedTuple):
    """Author/committer identity recorded on commits."""
    name: str
    email: str

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"

    @classmethod
    def parse(cls, text: str) -> 'Identity':
        """
        Parse a `Name <email>` string.

        Raises:
            ValueError: If text is not in that format
        """
        text = text.strip()
        if not text.endswith('>') or '<' not in text:
            raise ValueError(f"Invalid author {text!r}, expected 'Name <email>'")
        name, _, email = text[:-1].rpartition('<')
        name = name.strip()
        email = email.strip()
        if not name or not email:
            raise ValueError(f"Invalid author {text!r}, expected 'Name <email>'")
        return cls(name, email)


def _read_ini(path: Optional[Path]) -> configparser.ConfigParser:
    # Git configs may repeat keys and contain '%' characters
    parser = configparser.ConfigParser(strict=False, interpolation=None)
    if path is not None and path.exists():
        try:
            parser.read(path)
        except configparser.Error as e:
            logger.warning(f"ignoring unreadable config file {path}: {e}")
    return parser


class Config:
    """
    Reads CG configuration.

    Configuration is stored in INI format:
    - Global config: ~/.cgconfig
    - Repository config: .git/config

    Repository config takes precedence over global config.
    Environment variables take highest precedence.
    """

    GLOBAL_CONFIG_PATH = Path.home() / '.cgconfig'

    def __init__(self, repo_config_path: Optional[Path] = None, global_config_path: Optional[Path] = None):
        """
        Initialize Config reader.

        Args:
            repo_config_path: Path to repository config file, if in a repo
            global_config_path: Override for the global config location
        """
        self.repo_config_path = repo_config_path
        self.global_config_path = global_config_path or self.GLOBAL_CONFIG_PATH
        self._global_config = None
        self._repo_config = None

    @property
    def global_config(self) -> configparser.ConfigParser:
        """Load and return global configuration."""
        if self._global_config is None:
            self._global_config = _read_ini(self.global_config_path)
        return self._global_config

    @property
    def repo_config(self) -> Optional[configparser.ConfigParser]:
        """Load and return repository configuration."""
        if self._repo_config is None and self.repo_config_path:
            self._repo_config = _read_ini(self.repo_config_path)
        return self._repo_config

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value.

        Priority order (highest to lowest):
        1. Environment variables (CG_<SECTION>_<KEY>)
        2. Repository config
        3. Global config
        4. Fallback value

        Args:
            section: Config section (e.g., 'user', 'core')
            key: Config key (e.g., 'name', 'email')
            fallback: Default value if not found

        Returns:
            Configuration value or fallback
        """
        env_key = f"CG_{section.upper()}_{key.upper()}"
        env_value = os.environ.get(env_key)
        if env_value:
            return env_value

        if self.repo_config and self.repo_config.has_option(section, key):
            return self.repo_config.get(section, key)

        if self.global_config.has_option(section, key):
            return self.global_config.get(section, key)

        return fallback

    def get_user_identity(self) -> Identity:
        """
        Get user name and email for commits.

        Falls back to GIT_AUTHOR_NAME/GIT_AUTHOR_EMAIL and finally to the
        built-in CG identity.

        Returns:
            Identity to record as author and committer
        """
        name = self.get('user', 'name') or os.environ.get('GIT_AUTHOR_NAME') or DEFAULT_AUTHOR_NAME
        email = self.get('user', 'email') or os.environ.get('GIT_AUTHOR_EMAIL') or DEFAULT_AUTHOR_EMAIL
        return Identity(name, email)

    @property
    def git_executable(self) -> str:
        """Git binary used by the object store."""
        return self.get('core', 'git', DEFAULT_GIT_EXECUTABLE)


def get_config(repo=None) -> Config:
    """
    Get a Config instance.

    Args:
        repo: Repository instance, or None for global-only config

    Returns:
        Config instance
    """
    if repo:
        return Config(repo.config_file)
    return Config()
