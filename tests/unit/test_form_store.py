"""Tests for the form store."""

from __future__ import annotations

import json

import pytest

from medintake.exceptions import ConflictError, DataShapeError, NotFoundError, StorageError
from medintake.models import BooleanQuestion, StringQuestion
from medintake.questionnaire import get_default_questions
from medintake.stores.form_store import FormStore, parse_questions
from tests.fakes.fake_persistence import FailingPersistenceBackend, FakePersistenceBackend


def _seed_raw_form(backend: FakePersistenceBackend, form_id: int, **fields: object) -> None:
    record = {"id": form_id, "name": "Legacy", "version": 1, **fields}
    backend.save(f"forms/{form_id:010d}", json.dumps(record))


class TestParseQuestions:
    def test_valid_list(self) -> None:
        parsed = parse_questions([{"id": "fever", "text": "Fieber?", "answerType": "boolean"}])
        assert isinstance(parsed[0], BooleanQuestion)

    @pytest.mark.parametrize("raw", [None, "[]", {"id": "fever"}, 7])
    def test_wrong_container(self, raw: object) -> None:
        with pytest.raises(DataShapeError):
            parse_questions(raw)

    def test_unknown_answer_type(self) -> None:
        with pytest.raises(DataShapeError) as exc_info:
            parse_questions([{"id": "x", "text": "X", "answerType": "date"}])
        assert exc_info.value.details


class TestCreateAndFetch:
    @pytest.mark.asyncio
    async def test_create_assigns_increasing_ids(self, form_store: FormStore) -> None:
        first = await form_store.create_form("A", get_default_questions(), patient_id="p1")
        second = await form_store.create_form("B", get_default_questions(), patient_id="p1")
        assert second.id > first.id
        assert first.version == 1
        assert first.patient_id == "p1"
        assert len(first.questions) == 65

    @pytest.mark.asyncio
    async def test_get_by_id_round_trips(self, form_store: FormStore) -> None:
        created = await form_store.create_form("A", [StringQuestion(id="job", text="Beruf?")])
        fetched = await form_store.get_form_by_id(created.id)
        assert fetched.name == "A"
        assert fetched.questions[0].id == "job"

    @pytest.mark.asyncio
    async def test_get_missing_form(self, form_store: FormStore) -> None:
        with pytest.raises(NotFoundError, match="Form 99 not found"):
            await form_store.get_form_by_id(99)

    @pytest.mark.asyncio
    async def test_latest_form_global_and_scoped(self, form_store: FormStore) -> None:
        a = await form_store.create_form("A", [], patient_id="p1")
        b = await form_store.create_form("B", [], patient_id="p2")
        assert (await form_store.get_latest_form()).id == b.id
        assert (await form_store.get_latest_form("p1")).id == a.id

    @pytest.mark.asyncio
    async def test_latest_form_missing(self, form_store: FormStore) -> None:
        with pytest.raises(NotFoundError):
            await form_store.get_latest_form()
        await form_store.create_form("A", [], patient_id="p1")
        with pytest.raises(NotFoundError, match="for patient p2"):
            await form_store.get_latest_form("p2")

    @pytest.mark.asyncio
    async def test_list_forms(self, form_store: FormStore) -> None:
        await form_store.create_form("A", [], patient_id="p1")
        await form_store.create_form("B", [], patient_id="p2")
        assert [f.name for f in await form_store.list_forms()] == ["A", "B"]
        assert [f.name for f in await form_store.list_forms("p2")] == ["B"]


class TestMalformedQuestions:
    @pytest.mark.asyncio
    async def test_json_string_questions_decode_to_none(
        self, backend: FakePersistenceBackend, form_store: FormStore
    ) -> None:
        _seed_raw_form(backend, 1, questions=json.dumps([{"id": "a", "text": "A", "answerType": "string"}]))
        form = await form_store.get_form_by_id(1)
        assert form.questions is None

    @pytest.mark.asyncio
    async def test_absent_questions_decode_to_none(
        self, backend: FakePersistenceBackend, form_store: FormStore
    ) -> None:
        _seed_raw_form(backend, 1)
        assert (await form_store.get_form_by_id(1)).questions is None

    @pytest.mark.asyncio
    async def test_unknown_type_decodes_to_none(
        self, backend: FakePersistenceBackend, form_store: FormStore
    ) -> None:
        _seed_raw_form(backend, 1, questions=[{"id": "a", "text": "A", "answerType": "date"}])
        assert (await form_store.get_form_by_id(1)).questions is None

    @pytest.mark.asyncio
    async def test_corrupt_record(self, backend: FakePersistenceBackend, form_store: FormStore) -> None:
        backend.save("forms/0000000001", "{not json")
        with pytest.raises(StorageError, match="Corrupt record"):
            await form_store.get_form_by_id(1)


class TestUpdateQuestions:
    @pytest.mark.asyncio
    async def test_full_replace_bumps_version(self, form_store: FormStore) -> None:
        form = await form_store.create_form("A", get_default_questions())
        updated = await form_store.update_questions(
            form.id, [BooleanQuestion(id="fever", text="Fieber?", answer=True, confidence=0.9)]
        )
        assert updated.version == 2
        assert [q.id for q in updated.questions] == ["fever"]
        assert (await form_store.get_form_by_id(form.id)).version == 2

    @pytest.mark.asyncio
    async def test_expected_version_conflict(self, form_store: FormStore) -> None:
        form = await form_store.create_form("A", get_default_questions())
        await form_store.update_questions(form.id, form.questions, expected_version=1)
        with pytest.raises(ConflictError) as exc_info:
            await form_store.update_questions(form.id, form.questions, expected_version=1)
        assert exc_info.value.expected_version == 1
        assert exc_info.value.actual_version == 2

    @pytest.mark.asyncio
    async def test_without_expected_version_last_writer_wins(self, form_store: FormStore) -> None:
        form = await form_store.create_form("A", [StringQuestion(id="job", text="Beruf?")])
        await form_store.update_questions(form.id, [StringQuestion(id="job", text="Beruf?", answer="Koch")])
        final = await form_store.update_questions(
            form.id, [StringQuestion(id="job", text="Beruf?", answer="Lehrer")]
        )
        assert final.questions[0].answer == "Lehrer"
        assert final.version == 3

    @pytest.mark.asyncio
    async def test_update_missing_form(self, form_store: FormStore) -> None:
        with pytest.raises(NotFoundError):
            await form_store.update_questions(5, [])


class TestStorageFailures:
    @pytest.mark.asyncio
    async def test_write_failure_wrapped(self) -> None:
        store = FormStore(FailingPersistenceBackend())
        with pytest.raises(StorageError) as exc_info:
            await store.create_form("A", [])
        assert exc_info.value.details == "OSError"
        assert isinstance(exc_info.value.__cause__, OSError)

    @pytest.mark.asyncio
    async def test_read_failure_wrapped(self) -> None:
        store = FormStore(FailingPersistenceBackend(fail_reads=True, fail_writes=False))
        with pytest.raises(StorageError):
            await store.get_form_by_id(1)
