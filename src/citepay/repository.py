"""Work repositories: where citable works come from."""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional
from urllib.parse import quote

import requests

from .config import Config
from .errors import WorkNotFoundError, WorkRepositoryError
from .models import Work

logger = logging.getLogger(__name__)


class WorkRepository(ABC):
    """Abstract source of work metadata."""

    @abstractmethod
    def fetch_work(self, work_id: str) -> Work:
        """Return the work with ``work_id`` or raise WorkNotFoundError."""
        pass


class InMemoryWorkRepository(WorkRepository):
    """Works held in a dictionary."""

    def __init__(self, works: Iterable[Work] = ()):
        self._works = {}
        for work in works:
            self.add(work)

    def add(self, work: Work) -> None:
        self._works[work.identifier] = work

    def fetch_work(self, work_id: str) -> Work:
        try:
            return self._works[work_id]
        except KeyError:
            raise WorkNotFoundError(work_id)

    def list_works(self) -> List[Work]:
        return list(self._works.values())


class JsonWorkRepository(InMemoryWorkRepository):
    """Works loaded from a JSON file.

    The file holds a list of works, a single work, or a wrapper object with
    the list under ``works``, ``papers`` or ``items``.
    """

    WRAPPER_KEYS = ['works', 'papers', 'items']

    def __init__(self, path: Optional[str] = None):
        self.path = path or Config.WORKS_FILE
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise WorkRepositoryError(f"Cannot read works file {self.path}: {e}") from e
        super().__init__(self.parse(content))
        logger.info(f"Loaded {len(self._works)} work(s) from {self.path}")

    @classmethod
    def parse(cls, content: str) -> List[Work]:
        """Parse string content into a list of Works, skipping malformed entries."""
        try:
            data: Any = json.loads(content)
        except json.JSONDecodeError as e:
            raise WorkRepositoryError(f"Invalid works JSON: {e}") from e

        # handle wrapper object
        if isinstance(data, dict):
            for key in cls.WRAPPER_KEYS:
                if isinstance(data.get(key), list):
                    data = data[key]
                    break
            else:
                data = [data]

        if not isinstance(data, list):
            return []

        works = []
        for item in data:
            if not isinstance(item, dict):
                continue
            try:
                works.append(Work.from_dict(item))
            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed work entry: {e}")
        return works


class HttpWorkRepository(WorkRepository):
    """Works fetched from a metadata API with GET ``{base_url}/{work_id}``."""

    def __init__(self, base_url: Optional[str] = None, timeout: int = 10):
        self.base_url = (base_url or Config.WORKS_API_URL).rstrip("/")
        if not self.base_url:
            raise ValueError("Works API URL is not configured (set WORKS_API_URL)")
        self.timeout = timeout

    def fetch_work(self, work_id: str) -> Work:
        url = f"{self.base_url}/{quote(work_id, safe='')}"
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Work lookup failed for {work_id}: {e}")
            raise WorkRepositoryError(f"Work lookup failed for {work_id}: {e}") from e

        if response.status_code == 404:
            raise WorkNotFoundError(work_id)
        try:
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.HTTPError, ValueError) as e:
            logger.error(f"Bad response for work {work_id}: {e}")
            raise WorkRepositoryError(f"Bad response for work {work_id}: {e}") from e

        if isinstance(data, dict) and isinstance(data.get("work"), dict):
            data = data["work"]
        if not isinstance(data, dict):
            raise WorkRepositoryError(f"Unexpected payload for work {work_id}")
        try:
            return Work.from_dict(data)
        except (ValueError, TypeError) as e:
            raise WorkRepositoryError(f"Malformed work {work_id}: {e}") from e
