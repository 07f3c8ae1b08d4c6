"""
Tests for the company CRUD layer.
"""

import pytest

from jobly.core.exceptions import BadRequestError, NotFoundError
from jobly.crud import company as company_crud


NEW_COMPANY = {
    "handle": "new",
    "name": "New",
    "description": "New Description",
    "numEmployees": 1,
    "logoUrl": "http://new.img",
}


class TestCreate:

    def test_create_then_get(self, db_session):
        company = company_crud.create(db_session, NEW_COMPANY)

        assert company == NEW_COMPANY
        assert company_crud.get(db_session, "new") == NEW_COMPANY

    def test_optional_fields_default_to_null(self, db_session):
        company = company_crud.create(db_session, {"handle": "bare", "name": "Bare", "description": "D"})

        assert company["numEmployees"] is None
        assert company["logoUrl"] is None

    def test_duplicate_rejected(self, db_session):
        company_crud.create(db_session, NEW_COMPANY)

        with pytest.raises(BadRequestError, match="Duplicate company: new"):
            company_crud.create(db_session, NEW_COMPANY)

    def test_duplicate_caught_by_constraint(self, db_session, monkeypatch):
        """A handle inserted between the check and the insert is still rejected"""
        real_query = company_crud.query
        skipped = []

        def skip_duplicate_check(db, sql, args=()):
            if sql.startswith("SELECT handle FROM companies") and not skipped:
                skipped.append(sql)
                return []
            return real_query(db, sql, args)

        monkeypatch.setattr(company_crud, "query", skip_duplicate_check)

        with pytest.raises(BadRequestError, match="Duplicate company: c1"):
            company_crud.create(db_session, {**NEW_COMPANY, "handle": "c1"})

        # Session is usable again after the rollback
        assert company_crud.get(db_session, "c1")["name"] == "C1"

    def test_negative_employees_is_not_a_duplicate(self, db_session):
        with pytest.raises(BadRequestError, match="Invalid company data") as exc_info:
            company_crud.create(db_session, {**NEW_COMPANY, "numEmployees": -1})

        assert "Duplicate" not in str(exc_info.value)
        with pytest.raises(NotFoundError):
            company_crud.get(db_session, "new")

    def test_missing_required_column_rejected(self, db_session):
        with pytest.raises(BadRequestError, match="Invalid company data"):
            company_crud.create(db_session, {**NEW_COMPANY, "name": None})

        assert len(company_crud.find_all(db_session)) == 3


class TestFindAll:

    def test_no_filter(self, db_session):
        companies = company_crud.find_all(db_session)

        assert [c["handle"] for c in companies] == ["c1", "c2", "c3"]
        assert companies[0] == {
            "handle": "c1",
            "name": "C1",
            "description": "Desc1",
            "numEmployees": 1,
            "logoUrl": "http://c1.img",
        }

    def test_empty_filters_same_as_none(self, db_session):
        assert company_crud.find_all(db_session, {}) == company_crud.find_all(db_session)

    def test_name_is_case_insensitive_substring(self, db_session):
        companies = company_crud.find_all(db_session, {"name": "c2"})

        assert [c["handle"] for c in companies] == ["c2"]

    def test_employee_range(self, db_session):
        companies = company_crud.find_all(db_session, {"minEmployees": 2, "maxEmployees": 3})

        assert [c["handle"] for c in companies] == ["c2", "c3"]

    def test_filters_are_conjunctive(self, db_session):
        companies = company_crud.find_all(db_session, {"name": "c", "maxEmployees": 1})

        assert [c["handle"] for c in companies] == ["c1"]

    def test_no_match(self, db_session):
        assert company_crud.find_all(db_session, {"name": "nope"}) == []

    @pytest.mark.parametrize("name", ["_", "%", "C_", "%1"])
    def test_wildcards_in_name_match_literally(self, db_session, name):
        assert company_crud.find_all(db_session, {"name": name}) == []

    def test_wildcard_characters_found_in_name(self, db_session):
        company_crud.create(db_session, {**NEW_COMPANY, "name": "50%_Off"})

        companies = company_crud.find_all(db_session, {"name": "%_o"})

        assert [c["handle"] for c in companies] == ["new"]

    def test_inverted_range_rejected(self, db_session):
        with pytest.raises(BadRequestError):
            company_crud.find_all(db_session, {"minEmployees": 5, "maxEmployees": 2})

    def test_no_jobs_embedded(self, db_session):
        for company in company_crud.find_all(db_session):
            assert "jobs" not in company


class TestGet:

    def test_works(self, db_session):
        company = company_crud.get(db_session, "c1")

        assert company["name"] == "C1"
        assert "jobs" not in company

    def test_not_found(self, db_session):
        with pytest.raises(NotFoundError, match="No company: nope"):
            company_crud.get(db_session, "nope")


class TestUpdate:

    def test_changes_only_supplied_fields(self, db_session):
        company = company_crud.update(db_session, "c1", {"name": "New", "numEmployees": 10})

        assert company == {
            "handle": "c1",
            "name": "New",
            "description": "Desc1",
            "numEmployees": 10,
            "logoUrl": "http://c1.img",
        }
        assert company_crud.get(db_session, "c1") == company

    def test_null_optional_fields(self, db_session):
        company = company_crud.update(db_session, "c1", {"numEmployees": None, "logoUrl": None})

        assert company["numEmployees"] is None
        assert company["logoUrl"] is None

    def test_handle_cannot_change(self, db_session):
        with pytest.raises(BadRequestError):
            company_crud.update(db_session, "c1", {"handle": "c1-new"})

        assert company_crud.get(db_session, "c1")["handle"] == "c1"

    def test_constraint_violation_rejected(self, db_session):
        with pytest.raises(BadRequestError, match="Invalid company data"):
            company_crud.update(db_session, "c1", {"numEmployees": -3})

        assert company_crud.get(db_session, "c1")["numEmployees"] == 1

    def test_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            company_crud.update(db_session, "nope", {"name": "x"})

    @pytest.mark.parametrize("handle", ["c1", "nope"])
    def test_empty_data_rejected_regardless_of_target(self, db_session, handle):
        with pytest.raises(BadRequestError, match="No data"):
            company_crud.update(db_session, handle, {})


class TestRemove:

    def test_works(self, db_session):
        company_crud.remove(db_session, "c2")

        assert [c["handle"] for c in company_crud.find_all(db_session)] == ["c1", "c3"]

    def test_cascades_to_jobs(self, db_session):
        from jobly.crud import job as job_crud

        company_crud.remove(db_session, "c1")

        assert job_crud.find_all(db_session) == []

    def test_everything_not_found_after_remove(self, db_session):
        company_crud.remove(db_session, "c2")

        with pytest.raises(NotFoundError):
            company_crud.get(db_session, "c2")
        with pytest.raises(NotFoundError):
            company_crud.update(db_session, "c2", {"name": "x"})
        with pytest.raises(NotFoundError):
            company_crud.remove(db_session, "c2")
