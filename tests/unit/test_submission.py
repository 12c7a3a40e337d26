"""Unit tests for the submission service: all-or-nothing ingestion."""

import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import PersistenceError, StageError, ValidationError
from app.db.base import Database
from app.domain.application import Application, Document
from app.domain.enums import ApplicationStatus
from app.repositories.application import ApplicationRepository
from app.services.document_stage import DocumentStage
from app.services.submission import SubmissionService
from app.storage.local import LocalFileStorage
from tests.helpers import count_rows, make_account, pdf, stored_files
from tests.unit.test_document_stage import BlockingStorage, FlakyStorage

PAYLOAD = {"projectName": "Metro Line Ext", "companyExperience": "5 years"}


@pytest.fixture
async def vendor(database: Database):
    return await make_account(database, "vendor@acme.in", "9876543210")


async def test_civil_submission_with_two_documents(
    database: Database, storage: LocalFileStorage, vendor
) -> None:
    async with database.session_factory() as s:
        svc = SubmissionService(s, DocumentStage(storage))
        app_id = await svc.submit(
            vendor.account_id, "civil", PAYLOAD, [pdf("gst.pdf"), pdf("pan.pdf")]
        )

    async with database.session_factory() as s:
        application = await ApplicationRepository(s).get_with_details(app_id)
        assert application is not None
        assert application.status == ApplicationStatus.PENDING_VERIFICATION.value
        assert application.department == "civil"
        assert application.account_id == vendor.account_id
        assert application.form_data["projectName"] == "Metro Line Ext"
        assert application.rejection_reason is None
        assert [d.file_name for d in application.documents] == ["gst.pdf", "pan.pdf"]
        for doc in application.documents:
            assert await storage.exists(doc.storage_path)

    assert len(stored_files(storage.root)) == 2


@pytest.mark.parametrize(
    ("department", "payload", "files", "message"),
    [
        ("", PAYLOAD, [pdf()], "Department is required"),
        ("civil", "", [pdf()], "Form data is required"),
        ("civil", "not json", [pdf()], "valid JSON"),
        ("civil", PAYLOAD, [], "At least one supporting document"),
        ("civil", PAYLOAD, None, "At least one supporting document"),
    ],
)
async def test_preconditions_checked_before_any_write(
    database: Database, storage: LocalFileStorage, vendor, department, payload, files, message
) -> None:
    async with database.session_factory() as s:
        svc = SubmissionService(s, DocumentStage(storage))
        with pytest.raises(ValidationError, match=message):
            await svc.submit(vendor.account_id, department, payload, files)

    assert stored_files(storage.root) == []
    assert await count_rows(database, Application) == 0


async def test_stage_failure_opens_no_transaction(
    database: Database, tmp_path, vendor
) -> None:
    storage = FlakyStorage(tmp_path / "flaky", fail_on=2)
    async with database.session_factory() as s:
        svc = SubmissionService(s, DocumentStage(storage))
        with pytest.raises(StageError):
            await svc.submit(vendor.account_id, "civil", PAYLOAD, [pdf("a.pdf"), pdf("b.pdf")])
        assert not s.in_transaction()

    assert stored_files(storage.root) == []
    assert await count_rows(database, Application) == 0
    assert await count_rows(database, Document) == 0


async def test_commit_failure_rolls_back_and_removes_staged_files(
    database: Database, storage: LocalFileStorage, vendor, monkeypatch
) -> None:
    async with database.session_factory() as s:
        async def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("database is locked"))

        monkeypatch.setattr(s, "commit", failing_commit)
        svc = SubmissionService(s, DocumentStage(storage))
        with pytest.raises(PersistenceError):
            await svc.submit(
                vendor.account_id, "electrical", PAYLOAD, [pdf("a.pdf"), pdf("b.pdf")]
            )

    assert stored_files(storage.root) == []
    assert await count_rows(database, Application) == 0
    assert await count_rows(database, Document) == 0


async def test_insert_failure_rolls_back_and_removes_staged_files(
    database: Database, storage: LocalFileStorage, vendor, monkeypatch
) -> None:
    async def failing_insert(self, **kwargs):
        raise OperationalError("INSERT INTO documents", {}, Exception("disk I/O error"))

    monkeypatch.setattr(ApplicationRepository, "create_with_documents", failing_insert)
    async with database.session_factory() as s:
        svc = SubmissionService(s, DocumentStage(storage))
        with pytest.raises(PersistenceError) as excinfo:
            await svc.submit(vendor.account_id, "mechanical", PAYLOAD, [pdf()])

    # Internal details stay out of the user-facing message
    assert "disk" not in excinfo.value.message
    assert stored_files(storage.root) == []
    assert await count_rows(database, Application) == 0


async def test_too_many_documents(database: Database, storage: LocalFileStorage, vendor) -> None:
    async with database.session_factory() as s:
        svc = SubmissionService(s, DocumentStage(storage, max_files=5))
        with pytest.raises(ValidationError, match="At most 5"):
            await svc.submit(
                vendor.account_id, "civil", PAYLOAD, [pdf(f"{i}.pdf") for i in range(6)]
            )
    assert stored_files(storage.root) == []


async def test_cancel_during_staging_leaves_nothing(database: Database, tmp_path, vendor) -> None:
    storage = BlockingStorage(tmp_path / "slow", block_on=2)
    async with database.session_factory() as s:
        svc = SubmissionService(s, DocumentStage(storage))
        task = asyncio.create_task(
            svc.submit(vendor.account_id, "civil", PAYLOAD, [pdf("a.pdf"), pdf("b.pdf")])
        )
        await storage.blocked.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert not s.in_transaction()

    assert stored_files(storage.root) == []
    assert await count_rows(database, Application) == 0
    assert await count_rows(database, Document) == 0


async def test_cancel_during_commit_rolls_back_and_removes_staged_files(
    database: Database, storage: LocalFileStorage, vendor, monkeypatch
) -> None:
    committing = asyncio.Event()

    async with database.session_factory() as s:
        async def hanging_commit():
            committing.set()
            await asyncio.Event().wait()

        monkeypatch.setattr(s, "commit", hanging_commit)
        svc = SubmissionService(s, DocumentStage(storage))
        task = asyncio.create_task(
            svc.submit(vendor.account_id, "civil", PAYLOAD, [pdf("a.pdf"), pdf("b.pdf")])
        )
        await committing.wait()
        assert len(stored_files(storage.root)) == 2

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert not s.in_transaction()

    assert stored_files(storage.root) == []
    assert await count_rows(database, Application) == 0
    assert await count_rows(database, Document) == 0
