"""Tests for work models and repositories."""
import json
from datetime import date
from decimal import Decimal
from unittest.mock import Mock, patch

import pytest
import requests

from citepay.errors import WorkNotFoundError, WorkRepositoryError
from citepay.models import Author, Work
from citepay.repository import HttpWorkRepository, InMemoryWorkRepository, JsonWorkRepository


class TestWorkModel:
    """Tests for the Work and Author models."""

    def test_from_dict_camel_case(self, sample_works_json):
        work = Work.from_dict(json.loads(sample_works_json)["works"][0])
        assert work.identifier == "0x1234...5678"
        assert work.publication_date == date(2024, 3, 15)
        assert work.base_fee == Decimal("5")
        assert work.citation_count == 127
        assert work.total_earned == Decimal("635")
        assert work.authors[0] == Author("Dr. Sarah Chen", "0xabcd...1234", True)

    def test_payees(self, sample_work):
        assert [a.name for a in sample_work.payees] == ["Dr. Sarah Chen", "Dr. Michael Rodriguez"]

    def test_year_only_date(self):
        work = Work.from_dict({"id": "w", "title": "T", "publication_date": "2019"})
        assert work.year == 2019

    def test_string_authors(self):
        work = Work.from_dict({"id": "w", "title": "T", "authors": ["Ada Lovelace"]})
        assert work.authors == (Author(name="Ada Lovelace"),)
        assert work.payees == ()

    def test_missing_identifier(self):
        with pytest.raises(ValueError):
            Work.from_dict({"title": "No id"})

    def test_negative_base_fee(self):
        with pytest.raises(ValueError):
            Work(identifier="w", title="T", base_fee=Decimal("-1"))

    def test_to_dict(self, sample_work):
        data = sample_work.to_dict()
        assert data["identifier"] == "0x1234...5678"
        assert data["base_fee"] == "5"
        assert data["publication_date"] == "2024-03-15"
        assert "abstract" not in data


class TestInMemoryWorkRepository:
    """Tests for InMemoryWorkRepository."""

    def test_fetch(self, sample_work):
        repo = InMemoryWorkRepository([sample_work])
        assert repo.fetch_work(sample_work.identifier) is sample_work

    def test_missing(self):
        with pytest.raises(WorkNotFoundError) as exc_info:
            InMemoryWorkRepository().fetch_work("nope")
        assert str(exc_info.value) == "Work not found: nope"


class TestJsonWorkRepository:
    """Tests for JsonWorkRepository."""

    def test_load_file(self, tmp_path, sample_works_json):
        path = tmp_path / "works.json"
        path.write_text(sample_works_json, encoding="utf-8")

        repo = JsonWorkRepository(str(path))
        work = repo.fetch_work("0x1234...5678")
        assert work.field == "Synthetic Biology"
        assert len(work.authors) == 3
        assert len(work.payees) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(WorkRepositoryError):
            JsonWorkRepository(str(tmp_path / "missing.json"))

    def test_parse_list(self):
        works = JsonWorkRepository.parse('[{"id": "a", "title": "A"}, {"id": "b", "title": "B"}]')
        assert [w.identifier for w in works] == ["a", "b"]

    def test_parse_single_object(self):
        works = JsonWorkRepository.parse('{"id": "a", "title": "A"}')
        assert [w.identifier for w in works] == ["a"]

    def test_parse_papers_wrapper(self):
        works = JsonWorkRepository.parse('{"papers": [{"id": "a", "title": "A"}]}')
        assert len(works) == 1

    def test_parse_skips_malformed(self):
        content = json.dumps([
            {"id": "good", "title": "Good"},
            {"title": "No identifier"},
            {"id": "bad-fee", "title": "Bad", "citationReward": "lots"},
            "not an object",
        ])
        works = JsonWorkRepository.parse(content)
        assert [w.identifier for w in works] == ["good"]

    def test_parse_invalid_json(self):
        with pytest.raises(WorkRepositoryError):
            JsonWorkRepository.parse("{not json")


class TestHttpWorkRepository:
    """Tests for HttpWorkRepository."""

    @pytest.fixture
    def repo(self):
        return HttpWorkRepository("https://works.example.org/api/works/", timeout=5)

    @patch("citepay.repository.requests.get")
    def test_fetch(self, mock_get, repo, sample_works_json):
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.json.return_value = {"work": json.loads(sample_works_json)["works"][0]}
        mock_get.return_value = mock_response

        work = repo.fetch_work("0x1234...5678")

        mock_get.assert_called_once_with("https://works.example.org/api/works/0x1234...5678", timeout=5)
        assert work.title.startswith("CRISPR-Cas9")
        assert work.base_fee == Decimal("5")

    @patch("citepay.repository.requests.get")
    def test_identifier_is_quoted(self, mock_get, repo):
        mock_get.return_value = Mock(status_code=200, json=Mock(return_value={"id": "a/b", "title": "T"}))
        repo.fetch_work("a/b")
        assert mock_get.call_args[0][0].endswith("/a%2Fb")

    @patch("citepay.repository.requests.get")
    def test_not_found(self, mock_get, repo):
        mock_get.return_value = Mock(status_code=404)
        with pytest.raises(WorkNotFoundError):
            repo.fetch_work("missing")

    @patch("citepay.repository.requests.get")
    def test_network_error(self, mock_get, repo):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(WorkRepositoryError):
            repo.fetch_work("w")

    @patch("citepay.repository.requests.get")
    def test_server_error(self, mock_get, repo):
        mock_response = Mock(status_code=500)
        mock_response.raise_for_status.side_effect = requests.exceptions.HTTPError("500")
        mock_get.return_value = mock_response
        with pytest.raises(WorkRepositoryError):
            repo.fetch_work("w")

    @patch("citepay.repository.requests.get")
    def test_unexpected_payload(self, mock_get, repo):
        mock_get.return_value = Mock(status_code=200, json=Mock(return_value=["not", "a", "work"]))
        with pytest.raises(WorkRepositoryError):
            repo.fetch_work("w")

    def test_requires_url(self):
        with patch("citepay.repository.Config.WORKS_API_URL", ""):
            with pytest.raises(ValueError):
                HttpWorkRepository()
